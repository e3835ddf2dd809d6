from aurarecon.core.models import GuestSession, ScanMetadata, SessionCookie
from aurarecon.core.session import (
    build_cookie_header, detect_session_type, extract_session, parse_cookies,
    parse_set_cookie, validate_session,
)
from aurarecon.parsers.metadata import extract_aura_context, extract_metadata

CONTEXT = ('{"mode":"PROD","fwuid":"FW123","app":"siteforce:communityApp",'
           '"loaded":{"APPLICATION@markup://siteforce:communityApp":"1183_a",'
           '"COMPONENT@markup://force:outputField":"77_b"},"dn":[],"uad":true}')


# ── metadata ───────────────────────────────────────────────────

def test_inline_context_fields():
    meta = extract_metadata(CONTEXT, "https://x.example/s/")

    assert meta.fwuid == "FW123"
    assert meta.app == "siteforce:communityApp"
    assert meta.scanned_url == "https://x.example/s/"
    assert meta.loaded_components == [
        "APPLICATION@markup://siteforce:communityApp",
        "COMPONENT@markup://force:outputField",
    ]


def test_alternative_patterns_in_order():
    both = '"fwuid":"FIRST" <script src="/auraFW/javascript/SECOND/aura_prod.js">'
    path_only = '<script src="/s/sfsites/auraFW/javascript/PATHID/aura_prod.js">'
    bare = "var cfg = { fwuid: 'BARE', app: 'c:myApp', token: 'tok' };"

    assert extract_metadata(both, "").fwuid == "FIRST"
    assert extract_metadata(path_only, "").fwuid == "PATHID"
    bare_meta = extract_metadata(bare, "")
    assert (bare_meta.fwuid, bare_meta.app, bare_meta.token) == ("BARE", "c:myApp", "tok")


def test_token_and_api_version():
    text = 'aura.token = "eyJ.abc"; fetch("/services/data/v58.0/sobjects")'

    meta = extract_metadata(text, "")

    assert meta.token == "eyJ.abc"
    assert meta.api_version == "58.0"


def test_missing_fields_stay_empty():
    meta = extract_metadata("<html></html>", "https://x.example/")

    assert meta.fwuid is None and meta.app is None and meta.token is None
    assert meta.api_version is None
    assert meta.loaded_components == []
    assert meta.detected_endpoints == []
    assert meta.aura_context is None


def test_endpoints_by_substring():
    meta = extract_metadata('post("/services/apexrest/orders")', "")

    assert [e.path for e in meta.detected_endpoints] == ["/services/apexrest/"]
    assert meta.detected_endpoints[0].type == "apex-rest"


def test_component_defs_are_appended_once():
    text = CONTEXT + ' {componentDef: "markup://c:caseList"} {componentDef: "markup://c:caseList"}'

    meta = extract_metadata(text, "")

    assert meta.loaded_components[-1] == "COMPONENT@markup://c:caseList"
    assert len(meta.loaded_components) == 3


def test_aura_context_reconstruction():
    ctx = extract_aura_context(CONTEXT)

    assert ctx.mode == "PROD"
    assert ctx.fwuid == "FW123"
    assert ctx.uad is True
    assert ctx.loaded["COMPONENT@markup://force:outputField"] == "77_b"
    assert ctx.to_dict()["dn"] == []


def test_mode_without_fwuid_is_not_a_context():
    assert extract_aura_context('{"mode":"DEV"}') is None


# ── cookies & session ──────────────────────────────────────────

def test_parse_set_cookie_attributes():
    c = parse_set_cookie("sid=00Dxx!AQ.abc; Path=/s; SECURE; httponly; Domain=.force.com")

    assert (c.name, c.value) == ("sid", "00Dxx!AQ.abc")
    assert (c.path, c.domain, c.secure, c.http_only) == ("/s", ".force.com", True, True)


def test_parse_set_cookie_defaults():
    c = parse_set_cookie("renderCtx=abc")

    assert (c.path, c.domain, c.secure, c.http_only) == ("/", "", False, False)


def test_unusable_cookie_lines_are_dropped():
    cookies = parse_cookies(["novalue", "=orphan", "empty=", "ok=1; Path=/"])

    assert [c.name for c in cookies] == ["ok"]


def test_cookie_header():
    cookies = parse_cookies(["a=1; Path=/", "b=2; Secure"])

    assert build_cookie_header(cookies) == "a=1; b=2"
    assert build_cookie_header([]) == ""


def test_session_types():
    sid = SessionCookie("sid", "x")
    oid = SessionCookie("oid", "y")
    other = SessionCookie("BrowserId", "z")

    assert detect_session_type([sid, oid], '"isGuest":true') == "authenticated"
    assert detect_session_type([sid], "") == "guest"
    assert detect_session_type([other], "") == "guest"
    assert detect_session_type([], '{"userType":"Guest"}') == "guest"
    assert detect_session_type([], "<html></html>") == "unknown"


def test_extract_session():
    session = extract_session(["sid=abc; Path=/", "oid=00D; Path=/"], "")

    assert session.session_type == "authenticated"
    assert session.raw_header == "sid=abc; oid=00D"
    assert session.to_dict()["rawCookieHeader"] == "sid=abc; oid=00D"


def test_validate_session():
    meta = ScanMetadata(fwuid="FW")
    session = GuestSession(cookies=[SessionCookie("renderCtx", "1")])

    check = validate_session(meta, session)

    assert check.ready
    assert check.has_render_ctx
    assert check.missing() == ["token", "sid", "aura_context"]
    assert not validate_session(ScanMetadata(), GuestSession()).ready
