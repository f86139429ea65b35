from collections.abc import Iterable

from signup_guard.settings import DEFAULT_DISPOSABLE_DOMAINS


def email_domain(email: str) -> str | None:
    parts = email.split("@")
    if len(parts) < 2:
        return None
    return parts[1].lower()


def is_disposable_email(
    email: str,
    domains: Iterable[str] = DEFAULT_DISPOSABLE_DOMAINS,
) -> bool:
    domain = email_domain(email)
    if not domain:
        return False
    return any(candidate in domain for candidate in domains)


class DisposableEmailCheck:
    def __init__(self, domains: Iterable[str] = DEFAULT_DISPOSABLE_DOMAINS):
        self._domains = tuple(d.lower() for d in domains)

    def check(self, email: str) -> bool:
        return is_disposable_email(email, self._domains)


__all__ = ("DisposableEmailCheck", "email_domain", "is_disposable_email")
