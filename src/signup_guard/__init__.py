"""Device, IP and velocity based risk scoring for account signups."""

__version__ = "1.0.0"
