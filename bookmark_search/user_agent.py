"""User-agent parsing into the device/os/browser labels stored on bookmarks."""
import re
from dataclasses import dataclass


UNKNOWN = "Unknown"

_WINDOWS_VERSIONS = {
    "10.0": "Windows 10/11",
    "6.3": "Windows 8.1",
    "6.2": "Windows 8",
    "6.1": "Windows 7",
}


@dataclass(frozen=True)
class UserAgentInfo:
    user_agent: str
    browser: str = UNKNOWN
    os: str = UNKNOWN
    device: str = UNKNOWN


def _detect_browser(ua: str) -> str:
    if "Firefox" in ua and "Chrome" not in ua:
        return "Firefox"
    if "Chrome" in ua and "Edge" not in ua:
        if "OPR" in ua:
            return "Opera"
        if "Brave" in ua:
            return "Brave"
        return "Chrome"
    if "Edge" in ua:
        return "Edge"
    if "Safari" in ua and "Chrome" not in ua:
        return "Safari"
    if "Opera" in ua:
        return "Opera"
    return UNKNOWN


def _detect_os(ua: str) -> str:
    if "Windows NT" in ua:
        match = re.search(r"Windows NT (\d+\.\d+)", ua)
        if match:
            return _WINDOWS_VERSIONS.get(match.group(1), f"Windows {match.group(1)}")
        return "Windows"
    if "Mac OS X" in ua:
        match = re.search(r"Mac OS X (\d+[._]\d+[._]\d+)", ua)
        if match:
            return f"macOS {match.group(1).replace('_', '.')}"
        return "macOS"
    if "Linux" in ua:
        if "Android" in ua:
            match = re.search(r"Android (\d+(?:\.\d+)?)", ua)
            return f"Android {match.group(1)}" if match else "Android"
        return "Linux"
    if "iPhone OS" in ua or "iPad" in ua:
        name = "iPadOS" if "iPad" in ua else "iOS"
        match = re.search(r"OS (\d+[._]\d+(?:[._]\d+)?)", ua)
        if match:
            return f"{name} {match.group(1).replace('_', '.')}"
        return name
    return UNKNOWN


def _detect_device(ua: str) -> str:
    if "Mobile" in ua or "Android" in ua:
        if "iPad" in ua:
            return "Tablet"
        if "iPhone" in ua or "iPod" in ua:
            return "Mobile"
        if "Android" in ua:
            return "Mobile" if "Mobile" in ua else "Tablet"
        return "Mobile"
    if "iPad" in ua:
        return "Tablet"
    return "Desktop"


def parse_user_agent(user_agent: str) -> UserAgentInfo:
    """Extract browser, OS and device labels from a user-agent string.

    Detection is substring based and checked in a fixed order, so iOS
    user agents (which mention "Mac OS X") are labelled macOS.

    Args:
        user_agent: Raw user-agent header value

    Returns:
        UserAgentInfo with "Unknown" for anything not recognized
    """
    ua = user_agent or ""
    return UserAgentInfo(
        user_agent=ua,
        browser=_detect_browser(ua),
        os=_detect_os(ua),
        device=_detect_device(ua),
    )


def format_user_agent_info(info: UserAgentInfo) -> str:
    return f"{info.browser} on {info.os} ({info.device})"
