import re

from signup_guard.api.modules.fraud.schema import ClientEnvironment, DeviceInfo

MOBILE_UA_PATTERN = re.compile(r"Mobile|Android|iPhone|iPod")
TABLET_UA_PATTERN = re.compile(r"Tablet|iPad")

WINDOWS_NT_VERSIONS = (
    ("Windows NT 10.0", "10/11"),
    ("Windows NT 6.3", "8.1"),
    ("Windows NT 6.2", "8"),
    ("Windows NT 6.1", "7"),
)


def _match(pattern: str, ua: str) -> str:
    found = re.search(pattern, ua)
    return found.group(1) if found else ""


def detect_browser(ua: str) -> tuple[str, str]:
    if "Edg/" in ua:
        return "Edge", _match(r"Edg/([\d.]+)", ua)
    if "Chrome/" in ua:
        return "Chrome", _match(r"Chrome/([\d.]+)", ua)
    if "Firefox/" in ua:
        return "Firefox", _match(r"Firefox/([\d.]+)", ua)
    if "Safari/" in ua and "Chrome" not in ua:
        return "Safari", _match(r"Version/([\d.]+)", ua)
    if "Opera/" in ua or "OPR/" in ua:
        return "Opera", _match(r"(?:Opera|OPR)/([\d.]+)", ua)
    return "Unknown", ""


def detect_os(ua: str) -> tuple[str, str]:
    for marker, version in WINDOWS_NT_VERSIONS:
        if marker in ua:
            return "Windows", version
    if "Mac OS X" in ua:
        return "macOS", _match(r"Mac OS X ([\d_]+)", ua).replace("_", ".")
    if "Android" in ua:
        return "Android", _match(r"Android ([\d.]+)", ua)
    if "iOS" in ua or "iPhone" in ua or "iPad" in ua:
        return "iOS", _match(r"OS ([\d_]+)", ua).replace("_", ".")
    if "Linux" in ua:
        return "Linux", ""
    return "Unknown", ""


def detect_device_class(ua: str) -> str:
    if MOBILE_UA_PATTERN.search(ua):
        return "Mobile"
    if TABLET_UA_PATTERN.search(ua):
        return "Tablet"
    return "Desktop"


def get_device_info(environment: ClientEnvironment) -> DeviceInfo:
    ua = environment.user_agent
    browser, browser_version = detect_browser(ua)
    os_name, os_version = detect_os(ua)
    return DeviceInfo(
        browser=browser,
        browser_version=browser_version,
        os=os_name,
        os_version=os_version,
        device=detect_device_class(ua),
        screen_resolution=f"{environment.screen_width}x{environment.screen_height}",
        color_depth=f"{environment.color_depth}-bit",
        language=environment.language,
        platform=environment.platform,
        user_agent=ua,
        hardware_concurrency=environment.hardware_concurrency,
    )


__all__ = (
    "detect_browser",
    "detect_device_class",
    "detect_os",
    "get_device_info",
)
