import asyncio
import time
from enum import Enum
from typing import Any, Dict, List, Tuple
from urllib.parse import urlsplit

import httpx

from aurarecon.checkers.catalog import detect
from aurarecon.core.crawler import MAX_SCRIPTS, discover_scripts
from aurarecon.core.enricher import enrich
from aurarecon.core.errors import InputError, UpstreamFetchError
from aurarecon.core.merge import (
    fill_missing_parameters, merge_actions, merge_findings, merge_metadata,
)
from aurarecon.core.models import EnrichedAction, ScanResult, ScriptFetch
from aurarecon.core.session import extract_session
from aurarecon.parsers.descriptors import extract_descriptors
from aurarecon.parsers.metadata import extract_metadata

DEFAULT_TIMEOUT = 10.0

PAGE_HEADERS = {
    "User-Agent": ("Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
                   "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Accept-Encoding": "gzip, deflate",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
    "Cache-Control": "no-cache",
}

SCRIPT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"


class ScanState(Enum):
    IDLE = "idle"
    FETCHING_PAGE = "fetching-page"
    EXTRACTING_PAGE = "extracting-page"
    DISCOVERING_SCRIPTS = "discovering-scripts"
    FETCHING_SCRIPTS = "fetching-scripts"
    MERGING = "merging"
    DONE = "done"
    FAILED = "failed"


def validate_url(url) -> str:
    """Return *url* stripped if it is an absolute http(s) URL, else raise InputError."""
    if not url or not isinstance(url, str) or not url.strip():
        raise InputError("URL is required")
    url = url.strip()
    try:
        parts = urlsplit(url)
        # httpx is stricter than urlsplit about ports and IDNA hosts
        httpx.URL(url)
    except (ValueError, httpx.InvalidURL):
        raise InputError("Invalid URL format")
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise InputError("Invalid URL format")
    return url


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class Engine:
    def __init__(self, proxy: str | None = None, timeout: float = DEFAULT_TIMEOUT,
                 max_scripts: int = MAX_SCRIPTS, logger=None,
                 transport: httpx.AsyncBaseTransport | None = None):
        self.name = "AuraRecon"
        self.version = "1.0.0"
        self.proxy = proxy
        self.timeout = timeout
        self.max_scripts = max_scripts
        self.logger = logger
        self.transport = transport
        self.state = ScanState.IDLE

    def _client(self) -> httpx.AsyncClient:
        kwargs: Dict[str, Any] = {
            "verify": False, "follow_redirects": True, "timeout": self.timeout,
        }
        if self.transport is not None:
            kwargs["transport"] = self.transport
        elif self.proxy:
            kwargs["proxy"] = self.proxy
        return httpx.AsyncClient(**kwargs)

    def _enter(self, state: ScanState, detail: str = ""):
        self.state = state
        if self.logger:
            self.logger.debug(f"state → {state.value}" + (f" ({detail})" if detail else ""))

    # ---------- fetch helpers ----------

    async def _fetch_page(self, client: httpx.AsyncClient, url: str) -> httpx.Response:
        try:
            resp = await client.get(url, headers=PAGE_HEADERS)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise UpstreamFetchError(f"Failed to fetch URL: {exc}") from exc
        if not resp.is_success:
            raise UpstreamFetchError(
                f"Failed to fetch URL: {resp.status_code} {resp.reason_phrase}",
                status_code=resp.status_code)
        return resp

    async def _fetch_script(self, client: httpx.AsyncClient, url: str, cookie_header: str) -> ScriptFetch:
        """One scatter branch: never raises, failures land in the slot's error."""
        headers = {"User-Agent": SCRIPT_USER_AGENT}
        if cookie_header:
            headers["Cookie"] = cookie_header
        try:
            resp = await client.get(url, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            return ScriptFetch(url, error=f"{type(exc).__name__}: {exc}")
        if not resp.is_success:
            return ScriptFetch(url, error=f"HTTP {resp.status_code}")
        return ScriptFetch(url, text=resp.text)
    # -----------------------------------

    @staticmethod
    def _enrich_all(text: str) -> List[EnrichedAction]:
        return [enrich(d, text) for d in extract_descriptors(text)]

    async def scan(self, url: str) -> ScanResult:
        """Fetch *url* and its scripts, returning the merged result.

        Raises InputError before any I/O for a bad URL and UpstreamFetchError
        when the page itself cannot be retrieved. Script failures only add
        warnings.
        """
        target = validate_url(url)
        start = time.perf_counter()
        warnings: List[str] = []

        if self.logger:
            self.logger.info(f"Scanning {target}")

        async with self._client() as client:
            self._enter(ScanState.FETCHING_PAGE, target)
            try:
                resp = await self._fetch_page(client, target)
            except UpstreamFetchError:
                self._enter(ScanState.FAILED)
                raise
            html = resp.text
            page_url = str(resp.url)

            self._enter(ScanState.EXTRACTING_PAGE, f"{len(resp.content)} bytes")
            session = extract_session(resp.headers.get_list("set-cookie"), html)
            metadata = extract_metadata(html, target)
            actions = self._enrich_all(html)
            findings = detect(html)
            if self.logger:
                self.logger.debug(f"page: {len(actions)} actions, "
                                  f"{len(session.cookies)} cookies, {len(findings)} findings")

            self._enter(ScanState.DISCOVERING_SCRIPTS)
            script_urls = discover_scripts(html, page_url, self.max_scripts)

            self._enter(ScanState.FETCHING_SCRIPTS, f"{len(script_urls)} scripts")
            fetches: List[ScriptFetch] = await asyncio.gather(*(
                self._fetch_script(client, u, session.raw_header) for u in script_urls
            ))

        self._enter(ScanState.MERGING)
        for fetch in fetches:
            if not fetch.ok:
                warning = f"Failed to fetch script: {fetch.url} ({fetch.error})"
                warnings.append(warning)
                if self.logger:
                    self.logger.debug(warning)
                continue
            if not fetch.text:
                continue
            actions = merge_actions(actions, self._enrich_all(fetch.text))
            findings = merge_findings(findings, detect(fetch.text))
            metadata = merge_metadata(metadata, extract_metadata(fetch.text, target))

        full_text = "\n".join([html] + [f.text for f in fetches])
        actions = fill_missing_parameters(actions, full_text)

        result = ScanResult(
            controllers=actions,
            metadata=metadata,
            guest_session=session,
            vulnerabilities=findings,
            js_files_scanned=len(script_urls),
            page_size=len(resp.content),
            scan_duration=_elapsed_ms(start),
            warnings=warnings,
        )
        self._enter(ScanState.DONE)
        if self.logger:
            self.logger.ok(f"{result.raw_matches} actions, "
                           f"{len(findings)} findings in {result.scan_duration} ms")
        return result

    async def run(self, url) -> Tuple[int, Dict[str, Any]]:
        """Scan and wrap the outcome in the JSON envelope with an HTTP status."""
        start = time.perf_counter()
        try:
            result = await self.scan(url)
        except InputError as exc:
            return 400, {"success": False, "error": str(exc)}
        except UpstreamFetchError as exc:
            if self.logger:
                self.logger.fail(str(exc))
            return 502, {"success": False, "error": str(exc),
                         "scanDuration": _elapsed_ms(start)}
        except Exception as exc:
            self._enter(ScanState.FAILED, type(exc).__name__)
            if self.logger:
                self.logger.fail(f"Internal error: {exc}")
            return 500, {"success": False, "error": str(exc) or "Unknown error",
                         "scanDuration": _elapsed_ms(start)}
        return 200, result.to_dict()
