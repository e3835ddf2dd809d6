"""Cookie parsing and guest/authenticated session classification.

Salesforce marks an authenticated browser session with both a ``sid`` and an
``oid`` cookie. Anything less is treated as a guest session when there is
any cookie or guest marker at all.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional

from aurarecon.core.models import GuestSession, ScanMetadata, SessionCookie


# ── Guest markers ──────────────────────────────────────────────

_GUEST_PATTERNS = [
    re.compile(r"guest", re.I),
    re.compile(r"unauthenticated", re.I),
    re.compile(r"\"isGuest\"\s*:\s*true"),
    re.compile(r"\"userType\"\s*:\s*\"Guest\""),
]


def parse_set_cookie(line: str) -> Optional[SessionCookie]:
    """Parse one Set-Cookie line; None when it carries no name=value pair."""
    parts = [p.strip() for p in line.split(";")]
    name_value, attributes = parts[0], parts[1:]
    if "=" not in name_value:
        return None
    name, _, value = name_value.partition("=")
    name, value = name.strip(), value.strip()
    if not name or not value:
        return None

    cookie = SessionCookie(name=name, value=value)
    for attr in attributes:
        key, _, val = attr.partition("=")
        key = key.strip().lower()
        if key == "domain":
            cookie.domain = val.strip()
        elif key == "path":
            cookie.path = val.strip() or "/"
        elif key == "secure":
            cookie.secure = True
        elif key == "httponly":
            cookie.http_only = True
    return cookie


def parse_cookies(lines: Iterable[str]) -> List[SessionCookie]:
    cookies = []
    for line in lines:
        cookie = parse_set_cookie(line)
        if cookie is not None:
            cookies.append(cookie)
    return cookies


def build_cookie_header(cookies: Iterable[SessionCookie]) -> str:
    return "; ".join(f"{c.name}={c.value}" for c in cookies)


def detect_session_type(cookies: List[SessionCookie], text: str) -> str:
    names = {c.name.lower() for c in cookies}
    if "sid" in names and "oid" in names:
        return "authenticated"
    for rx in _GUEST_PATTERNS:
        if rx.search(text or ""):
            return "guest"
    return "guest" if cookies else "unknown"


def extract_session(set_cookie_headers: Iterable[str], text: str) -> GuestSession:
    cookies = parse_cookies(set_cookie_headers)
    return GuestSession(
        cookies=cookies,
        raw_header=build_cookie_header(cookies),
        session_type=detect_session_type(cookies, text),
    )


# ── Replay readiness ───────────────────────────────────────────

@dataclass
class SessionValidation:
    """What a manual replay of an Aura POST would still be missing."""
    has_token: bool
    has_fwuid: bool
    has_cookies: bool
    has_sid: bool
    has_render_ctx: bool
    has_aura_context: bool

    @property
    def ready(self) -> bool:
        return self.has_fwuid and self.has_cookies

    def missing(self) -> List[str]:
        return [name[4:] for name, ok in vars(self).items() if not ok]


def validate_session(metadata: ScanMetadata, session: GuestSession) -> SessionValidation:
    names = {c.name.lower() for c in session.cookies}
    return SessionValidation(
        has_token=bool(metadata.token),
        has_fwuid=bool(metadata.fwuid),
        has_cookies=bool(session.cookies),
        has_sid="sid" in names,
        has_render_ctx=any(n.startswith("renderctx") for n in names),
        has_aura_context=metadata.aura_context is not None,
    )
