"""HTTP boundary: POST /scan-url {"url": "..."} -> scan envelope.

Status codes: 200 success, 400 bad input, 502 target unreachable,
500 internal fault. Every body is JSON with a ``success`` flag.
"""

import asyncio
from typing import Callable, Optional

from flask import Flask, Response, jsonify, request

from aurarecon.core.engine import Engine

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def create_app(engine_factory: Optional[Callable[[], Engine]] = None, logger=None) -> Flask:
    """Build the Flask app; *engine_factory* yields a fresh Engine per request."""
    app = Flask(__name__)
    factory = engine_factory or (lambda: Engine(logger=logger))

    @app.after_request
    def add_cors(resp):
        resp.headers.update(CORS_HEADERS)
        return resp

    @app.route("/scan-url", methods=["POST", "OPTIONS"])
    def scan_url():
        if request.method == "OPTIONS":
            return Response(status=204)

        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            return jsonify(success=False, error="Request body must be a JSON object"), 400

        if logger:
            logger.info(f"POST /scan-url {payload.get('url')!r}")
        status, body = asyncio.run(factory().run(payload.get("url")))
        return jsonify(body), status

    return app
