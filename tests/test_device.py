import pytest

from signup_guard.api.modules.fraud.schema import ClientEnvironment
from signup_guard.api.modules.fraud.services.device import (
    detect_browser,
    detect_device_class,
    detect_os,
    get_device_info,
)

ANDROID_UA = (
    "Mozilla/5.0 (Linux; Android 14; Pixel 8) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Mobile Safari/537.36"
)
FIREFOX_LINUX_UA = "Mozilla/5.0 (X11; Linux x86_64; rv:121.0) Gecko/20100101 Firefox/121.0"
SAFARI_MAC_UA = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.1 Safari/605.1.15"
)
EDGE_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36 Edg/120.0.2210.91"
)


@pytest.mark.parametrize(
    ("ua", "expected"),
    [
        (EDGE_UA, ("Edge", "120.0.2210.91")),
        (ANDROID_UA, ("Chrome", "120.0.0.0")),
        (FIREFOX_LINUX_UA, ("Firefox", "121.0")),
        (SAFARI_MAC_UA, ("Safari", "17.1")),
        ("curl/8.4.0", ("Unknown", "")),
    ],
)
def test_detect_browser(ua, expected):
    assert detect_browser(ua) == expected


@pytest.mark.parametrize(
    ("ua", "expected"),
    [
        (EDGE_UA, ("Windows", "10/11")),
        (ANDROID_UA, ("Android", "14")),
        (FIREFOX_LINUX_UA, ("Linux", "")),
        (SAFARI_MAC_UA, ("macOS", "10.15.7")),
    ],
)
def test_detect_os(ua, expected):
    assert detect_os(ua) == expected


def test_device_class():
    assert detect_device_class(ANDROID_UA) == "Mobile"
    assert detect_device_class("Mozilla/5.0 (Tablet; rv:100.0)") == "Tablet"
    assert detect_device_class(FIREFOX_LINUX_UA) == "Desktop"


def test_device_info_formats_screen_fields():
    info = get_device_info(
        ClientEnvironment(
            user_agent=FIREFOX_LINUX_UA,
            screen_width=2560,
            screen_height=1440,
            color_depth=30,
            language="de-DE",
            platform="Linux x86_64",
            hardware_concurrency=16,
        )
    )

    assert info.screen_resolution == "2560x1440"
    assert info.color_depth == "30-bit"
    assert info.hardware_concurrency == 16
    assert info.user_agent == FIREFOX_LINUX_UA
