"""Aura bootstrap metadata: fwuid, app, token, loaded components, endpoints."""

import re
from typing import Dict, List, Optional, Pattern, Sequence

from aurarecon.core.knowledge import KNOWN_ENDPOINTS
from aurarecon.core.models import AuraContext, DetectedEndpoint, ScanMetadata


# ── Alternative patterns, tried in order ───────────────────────

FWUID_PATTERNS: Sequence[Pattern] = (
    re.compile(r"\"fwuid\"\s*:\s*\"([^\"]+)\""),
    re.compile(r"\bfwuid\s*:\s*[\"']([^\"']+)[\"']"),
    re.compile(r"/auraFW/javascript/([^/\"'\s]+)/"),
)

APP_PATTERNS: Sequence[Pattern] = (
    re.compile(r"\"app\"\s*:\s*\"([^\"]+)\""),
    re.compile(r"\bapp\s*:\s*[\"']([^\"']+)[\"']"),
)

TOKEN_PATTERNS: Sequence[Pattern] = (
    re.compile(r"aura\.token\s*=\s*[\"']([^\"']+)[\"']"),
    re.compile(r"\"aura\.token\"\s*:\s*\"([^\"]+)\""),
    re.compile(r"\btoken\s*:\s*[\"']([^\"']+)[\"']"),
)

API_VERSION_PATTERNS: Sequence[Pattern] = (
    re.compile(r"/services/data/v(\d+\.\d+)"),
    re.compile(r"\bapiVersion[\"']?\s*[:=]\s*[\"']?v?(\d+\.\d+)"),
    re.compile(r"\bv(\d+\.\d+)"),
)

_LOADED_BLOCK = re.compile(r"\"loaded\"\s*:\s*\{([^}]+)\}")
_LOADED_ENTRY = re.compile(r"\"([^\"]+)\"\s*:\s*\"?([^\",}]*)\"?")
_COMPONENT_DEF = re.compile(r"componentDef\s*:\s*[\"']markup://([^\"']+)[\"']")

_CONTEXT_MODE = re.compile(r"\"mode\"\s*:\s*\"([^\"]+)\"")
_CONTEXT_UAD = re.compile(r"\"uad\"\s*:\s*(true|false)")
CONTEXT_SPAN = 2000


def first_match(patterns: Sequence[Pattern], text: str) -> Optional[str]:
    """Group 1 of the first pattern that matches; later patterns are skipped."""
    for rx in patterns:
        m = rx.search(text)
        if m:
            return m.group(1)
    return None


def extract_loaded(text: str) -> Dict[str, str]:
    """Key/value pairs of the inline ``"loaded": {...}`` map, in order."""
    m = _LOADED_BLOCK.search(text)
    if not m:
        return {}
    return {k: v for k, v in _LOADED_ENTRY.findall(m.group(1))}


def extract_components(text: str) -> List[str]:
    components = list(extract_loaded(text))
    for name in _COMPONENT_DEF.findall(text):
        ref = f"COMPONENT@markup://{name}"
        if ref not in components:
            components.append(ref)
    return components


def detect_endpoints(text: str) -> List[DetectedEndpoint]:
    """Plain substring containment against the endpoint catalog."""
    return [ep for ep in KNOWN_ENDPOINTS if ep.path in text]


def extract_aura_context(text: str) -> Optional[AuraContext]:
    """Rebuild the context object from a ``"mode"`` key with fwuid/app nearby."""
    for m in _CONTEXT_MODE.finditer(text):
        window = text[m.start():m.start() + CONTEXT_SPAN]
        fwuid = FWUID_PATTERNS[0].search(window)
        app = APP_PATTERNS[0].search(window)
        if fwuid and app:
            uad = _CONTEXT_UAD.search(window)
            return AuraContext(
                mode=m.group(1),
                fwuid=fwuid.group(1),
                app=app.group(1),
                loaded=extract_loaded(window),
                uad=bool(uad and uad.group(1) == "true"),
            )
    return None


def extract_metadata(text: str, url: str) -> ScanMetadata:
    text = text or ""
    return ScanMetadata(
        fwuid=first_match(FWUID_PATTERNS, text),
        app=first_match(APP_PATTERNS, text),
        token=first_match(TOKEN_PATTERNS, text),
        scanned_url=url,
        api_version=first_match(API_VERSION_PATTERNS, text),
        loaded_components=extract_components(text),
        detected_endpoints=detect_endpoints(text),
        aura_context=extract_aura_context(text),
    )
