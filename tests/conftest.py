import httpx
import pytest

from vuln_lab.app import app as lab_app

LAB_URL = "http://lab.test/s/"


@pytest.fixture
def anyio_backend():
    return "asyncio"


class LabBridge:
    """Serves the AuraLab Flask app through an httpx mock transport."""

    def __init__(self):
        self.client = lab_app.test_client(use_cookies=False)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        headers = {k: v for k, v in request.headers.items() if k.lower() != "host"}
        resp = self.client.open(
            request.url.raw_path.decode("ascii"),
            method=request.method,
            headers=headers,
        )
        return httpx.Response(
            resp.status_code,
            headers=resp.headers.to_wsgi_list(),
            content=resp.get_data(),
            request=request,
        )

    def paths(self):
        return [r.url.path for r in self.requests]


@pytest.fixture
def lab():
    return LabBridge()


@pytest.fixture
def lab_transport(lab):
    return httpx.MockTransport(lab)


@pytest.fixture
def make_site():
    """Handler factory serving {path: body | (status, body[, headers]) | exception}."""

    def build(pages):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            entry = pages.get(request.url.path)
            if entry is None:
                return httpx.Response(404, text="not found", request=request)
            if isinstance(entry, Exception):
                raise entry
            headers = None
            if isinstance(entry, tuple):
                status, body, *extra = entry
                if extra:
                    headers = extra[0]
            else:
                status, body = 200, entry
            return httpx.Response(status, text=body, headers=headers, request=request)

        handler.calls = calls
        return handler

    return build
