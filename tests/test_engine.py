import httpx
import pytest

from aurarecon.core.engine import Engine, ScanState, validate_url
from aurarecon.core.errors import InputError


BASE = "https://portal.example.com"
LAB_URL = "http://lab.test/s/"


def _engine(handler, **kwargs):
    return Engine(transport=httpx.MockTransport(handler), **kwargs)


# ── input validation ───────────────────────────────────────────

@pytest.mark.parametrize("url, message", [
    (None, "URL is required"),
    ("", "URL is required"),
    ("   ", "URL is required"),
    ("not a url", "Invalid URL format"),
    ("ftp://files.example.com/x", "Invalid URL format"),
    ("/s/relative", "Invalid URL format"),
    ("http://example.com:abc/s/", "Invalid URL format"),
    ("http://xn--zz.com/s/", "Invalid URL format"),
])
def test_validate_url_rejects(url, message):
    with pytest.raises(InputError, match=message):
        validate_url(url)


def test_validate_url_strips():
    assert validate_url("  https://x.example/s/ ") == "https://x.example/s/"


@pytest.mark.anyio
async def test_bad_input_is_400_without_io(make_site):
    handler = make_site({})
    engine = _engine(handler)

    status, body = await engine.run("not a url")

    assert status == 400
    assert body == {"success": False, "error": "Invalid URL format"}
    assert handler.calls == []


@pytest.mark.anyio
async def test_unparseable_port_is_400_without_io(make_site):
    handler = make_site({})

    status, body = await _engine(handler).run("http://example.com:abc/s/")

    assert status == 400
    assert body["error"] == "Invalid URL format"
    assert handler.calls == []


# ── page failures ──────────────────────────────────────────────

@pytest.mark.anyio
async def test_page_http_error_is_502(make_site):
    engine = _engine(make_site({"/s/": (503, "down")}))

    status, body = await engine.run(BASE + "/s/")

    assert status == 502
    assert body["success"] is False
    assert "503" in body["error"]
    assert isinstance(body["scanDuration"], int)
    assert engine.state is ScanState.FAILED


@pytest.mark.anyio
async def test_page_transport_error_is_502(make_site):
    engine = _engine(make_site({"/s/": httpx.ConnectError("connection refused")}))

    status, body = await engine.run(BASE + "/s/")

    assert status == 502
    assert body["error"].startswith("Failed to fetch URL")


@pytest.mark.anyio
async def test_unexpected_fault_is_500(make_site, monkeypatch):
    def explode(text):
        raise RuntimeError("boom")

    monkeypatch.setattr("aurarecon.core.engine.detect", explode)
    engine = _engine(make_site({"/s/": "<html></html>"}))

    status, body = await engine.run(BASE + "/s/")

    assert status == 500
    assert body["success"] is False
    assert body["error"] == "boom"
    assert "scanDuration" in body


# ── successful scans ───────────────────────────────────────────

@pytest.mark.anyio
async def test_empty_page(make_site):
    engine = _engine(make_site({"/s/": "<html><body>nothing here</body></html>"}))

    status, body = await engine.run(BASE + "/s/")

    assert status == 200
    assert body["success"] is True
    assert body["rawMatches"] == 0
    assert body["controllers"] == []
    assert body["vulnerabilities"] == []
    assert body["jsFilesScanned"] == 0
    assert body["warnings"] == []
    assert body["guestSession"]["sessionType"] == "unknown"
    assert body["metadata"]["scannedUrl"] == BASE + "/s/"
    assert engine.state is ScanState.DONE


@pytest.mark.anyio
async def test_page_values_win_over_scripts(make_site):
    page = ('<script src="/a.js"></script>'
            '<script>var c = {"fwuid":"PAGE_FW"};</script>')
    script = 'var c = {"fwuid":"SCRIPT_FW","app":"c:portalApp"};'
    engine = _engine(make_site({"/s/": page, "/a.js": script}))

    result = await engine.scan(BASE + "/s/")

    assert result.metadata.fwuid == "PAGE_FW"
    assert result.metadata.app == "c:portalApp"


@pytest.mark.anyio
async def test_one_failed_script_is_one_warning(make_site):
    page = ('<script src="/ok1.js"></script><script src="/gone.js"></script>'
            '<script src="/ok2.js"></script>')
    engine = _engine(make_site({
        "/s/": page,
        "/ok1.js": '"apex://OneController/ACTION$getOne"',
        "/gone.js": httpx.ConnectError("reset by peer"),
        "/ok2.js": '"apex://TwoController/ACTION$getTwo"',
    }))

    result = await engine.scan(BASE + "/s/")

    assert result.js_files_scanned == 3
    assert result.warnings == [
        f"Failed to fetch script: {BASE}/gone.js (ConnectError: reset by peer)",
    ]
    assert [a.controller for a in result.controllers] == ["OneController", "TwoController"]


@pytest.mark.anyio
async def test_script_http_error_is_a_warning(make_site):
    engine = _engine(make_site({"/s/": '<script src="/x.js"></script>',
                                "/x.js": (500, "oops")}))

    result = await engine.scan(BASE + "/s/")

    assert result.warnings == [f"Failed to fetch script: {BASE}/x.js (HTTP 500)"]


@pytest.mark.anyio
async def test_malformed_script_src_is_discarded(make_site):
    page = ('<script src="/ok.js"></script>'
            '<script src="http://example.com:abc/bad.js"></script>'
            '<script src="http://xn--zz.com/bad.js"></script>')
    handler = make_site({"/s/": page, "/ok.js": '"apex://OkController/ACTION$getOk"'})

    status, body = await _engine(handler).run(BASE + "/s/")

    assert status == 200
    assert [a["controller"] for a in body["controllers"]] == ["OkController"]
    assert body["jsFilesScanned"] == 1
    assert body["warnings"] == []


@pytest.mark.anyio
async def test_script_fetch_never_raises_on_bad_url(make_site):
    engine = _engine(make_site({}))

    async with engine._client() as client:
        slot = await engine._fetch_script(client, "http://example.com:abc/bad.js", "")

    assert not slot.ok
    assert slot.error.startswith("InvalidURL")


@pytest.mark.anyio
async def test_parameters_upgraded_from_scripts(make_site):
    page = ('<script src="/w.js"></script>'
            '<script>var a = "apex://WidgetController/ACTION$saveWidget";</script>')
    script = 'cmp.get("c.saveWidget").setParams({ widgetId: id, label: "x" });'
    engine = _engine(make_site({"/s/": page, "/w.js": script}))

    result = await engine.scan(BASE + "/s/")

    (action,) = result.controllers
    assert action.risk_level == "high"
    assert [(p.name, p.type) for p in action.parameters] == [
        ("widgetId", "Id"), ("label", "String"),
    ]


@pytest.mark.anyio
async def test_session_cookies_are_replayed_to_scripts(make_site):
    handler = make_site({
        "/s/": (200, '<script src="/app.js"></script>',
                [("Set-Cookie", "sid=abc; Path=/; Secure"),
                 ("Set-Cookie", "oid=00D; Path=/")]),
        "/app.js": "var x = 1;",
    })
    engine = _engine(handler)

    result = await engine.scan(BASE + "/s/")

    script_request = handler.calls[-1]
    assert script_request.url.path == "/app.js"
    assert script_request.headers["cookie"] == "sid=abc; oid=00D"
    assert result.guest_session.session_type == "authenticated"


@pytest.mark.anyio
async def test_max_scripts_is_respected(make_site):
    page = "".join(f'<script src="/s{i}.js"></script>' for i in range(5))
    handler = make_site({"/s/": page})
    engine = _engine(handler, max_scripts=2)

    result = await engine.scan(BASE + "/s/")

    assert result.js_files_scanned == 2
    assert len(handler.calls) == 3


# ── end to end against the lab ─────────────────────────────────

@pytest.mark.anyio
async def test_lab_scan(lab, lab_transport):
    engine = Engine(transport=lab_transport)

    status, body = await engine.run(LAB_URL)

    assert status == 200
    assert body["rawMatches"] == len(body["controllers"]) == 6
    assert body["jsFilesScanned"] == 4
    assert body["warnings"] == [
        "Failed to fetch script: http://lab.test/resource/missing.js (HTTP 404)",
    ]
    assert "/resource/portal.js" in lab.paths()

    meta = body["metadata"]
    assert meta["apiVersion"] == "59.0"
    assert meta["app"] == "siteforce:communityApp"
    assert meta["auraContext"]["mode"] == "PROD"
    assert {"/s/sfsites/aura", "/services/data/"} <= {e["path"] for e in meta["detectedEndpoints"]}

    session = body["guestSession"]
    assert session["sessionType"] == "guest"
    assert {c["name"] for c in session["cookies"]} == {"renderCtx", "CookieConsentPolicy", "BrowserId"}

    vulns = {v["id"]: v for v in body["vulnerabilities"]}
    assert vulns["AURA-XO-001"]["occurrenceCount"] == 2
    assert "AURA-XO-002" in vulns
    assert "AURA-DOM-001" in vulns


@pytest.mark.anyio
async def test_lab_actions(lab_transport):
    result = await Engine(transport=lab_transport).scan(LAB_URL)
    actions = {a.name: a for a in result.controllers}

    assert actions["getRecordWithFields"].is_known
    assert actions["login"].requires_auth is False
    assert [(p.name, p.type) for p in actions["getCases"].parameters] == [
        ("accountId", "Id"), ("status", "String"),
        ("pageSize", "Integer"), ("includeClosed", "Boolean"),
    ]
    assert [p.name for p in actions["updateCaseStatus"].parameters] == ["caseId", "status"]
    assert actions["deleteAttachment"].controller == "PortalAttachmentController"
    assert actions["deleteAttachment"].risk_level == "critical"
    assert actions["getConfigData"].source_syntax == "aura"


@pytest.mark.anyio
async def test_lab_root_redirects(lab_transport):
    result = await Engine(transport=lab_transport).scan("http://lab.test/")

    assert result.metadata.scanned_url == "http://lab.test/"
    assert result.js_files_scanned == 4


class _Recorder:
    def __init__(self):
        self.lines = []

    def __getattr__(self, level):
        return lambda msg: self.lines.append((level, msg))


@pytest.mark.anyio
async def test_engine_logs_match_result_warnings(make_site):
    log = _Recorder()
    engine = _engine(make_site({"/s/": '<script src="/x.js"></script>'}), logger=log)

    result = await engine.scan(BASE + "/s/")

    messages = [msg for _, msg in log.lines]
    assert result.warnings[0] in messages
    assert messages[0] == f"Scanning {BASE}/s/"
    assert log.lines[-1][0] == "ok"
    assert log.lines[-1][1].startswith("0 actions, 0 findings in ")
