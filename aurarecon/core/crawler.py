"""Script-resource discovery using stdlib html.parser; URLs are checked against httpx."""

from html.parser import HTMLParser
from typing import List, Optional
from urllib.parse import urljoin, urlsplit

import httpx

MAX_SCRIPTS = 15


# ── HTML parser ────────────────────────────────────────────────

class _ScriptExtractor(HTMLParser):
    """Extract <script src> values from HTML."""

    def __init__(self):
        super().__init__()
        self.sources: List[str] = []

    def handle_starttag(self, tag, attrs):
        if tag == "script":
            for name, value in attrs:
                if name == "src" and value:
                    self.sources.append(value.strip())


# ── Helper functions ───────────────────────────────────────────

def extract_script_sources(html: str) -> List[str]:
    """All <script src> values that look like JavaScript resources."""
    parser = _ScriptExtractor()
    parser.feed(html or "")
    parser.close()
    return [src for src in parser.sources if ".js" in src.lower()]


def resolve_url(base_url: str, ref: str) -> Optional[str]:
    """Absolute http(s) URL for *ref*, or None if it cannot be resolved."""
    try:
        url = urljoin(base_url, ref)
        parts = urlsplit(url)
        httpx.URL(url)
    except (ValueError, httpx.InvalidURL):
        return None
    if parts.scheme not in ("http", "https") or not parts.netloc:
        return None
    return url


def discover_scripts(html: str, base_url: str, limit: int = MAX_SCRIPTS) -> List[str]:
    """
    Script URLs referenced by the page, resolved against *base_url*,
    deduplicated in document order and capped at *limit*.
    """
    urls: List[str] = []
    for src in extract_script_sources(html):
        url = resolve_url(base_url, src)
        if url is None or url in urls:
            continue
        urls.append(url)
        if len(urls) >= limit:
            break
    return urls
