"""Client identity profiles tried, in order, by the fetch cascade.

Mobile and in-app profiles come first: Korean marketplaces tend to let them
through more often than desktop browsers.
"""
from __future__ import annotations

from linkpreview.app.domain.models import ClientIdentity

HTML_ACCEPT = (
    "text/html,application/xhtml+xml,application/xml;q=0.9,"
    "image/avif,image/webp,*/*;q=0.8"
)
SAFARI_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"

DEFAULT_CLIENT_IDENTITIES: tuple[ClientIdentity, ...] = (
    ClientIdentity(
        name="naver-inapp-android",
        user_agent=(
            "Mozilla/5.0 (Linux; Android 15; SM-S911N Build/AP3A.240905.015.A2; wv) "
            "AppleWebKit/537.36 (KHTML, like Gecko) Version/4.0 Chrome/128.0.0.0 "
            "Whale/1.0.0.0 Crosswalk/29.128.0.15 Mobile Safari/537.36 "
            "NAVER(inapp; search; 2000; 12.14.32)"
        ),
        accept=HTML_ACCEPT,
    ),
    ClientIdentity(
        name="android-chrome",
        user_agent=(
            "Mozilla/5.0 (Linux; Android 10; SM-G975F) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Mobile Safari/537.36"
        ),
        accept=HTML_ACCEPT,
    ),
    ClientIdentity(
        name="iphone-safari",
        user_agent=(
            "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 "
            "(KHTML, like Gecko) Version/17.0 Mobile/15E148 Safari/604.1"
        ),
        accept=SAFARI_ACCEPT,
    ),
    ClientIdentity(
        name="windows-edge",
        user_agent=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36 Edg/120.0.0.0"
        ),
        accept=HTML_ACCEPT,
    ),
    ClientIdentity(
        name="windows-chrome",
        user_agent=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36"
        ),
        accept=HTML_ACCEPT,
    ),
    ClientIdentity(
        name="macos-chrome",
        user_agent=(
            "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
        ),
        accept=HTML_ACCEPT,
    ),
)

# Headers shared by every profile; Accept and User-Agent come from the profile.
NAVIGATION_HEADERS: dict[str, str] = {
    "Accept-Language": "ko-KR,ko;q=0.9,en-US;q=0.8,en;q=0.7",
    "Accept-Encoding": "gzip, deflate",
    "Referer": "https://www.google.com/",
    "Sec-Fetch-Dest": "document",
    "Sec-Fetch-Mode": "navigate",
    "Sec-Fetch-Site": "cross-site",
    "Upgrade-Insecure-Requests": "1",
    "Cache-Control": "max-age=0",
}


def build_headers(identity: ClientIdentity) -> dict[str, str]:
    headers = dict(NAVIGATION_HEADERS)
    headers["User-Agent"] = identity.user_agent
    headers["Accept"] = identity.accept
    return headers
