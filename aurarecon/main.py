import argparse
import asyncio
import json
import sys

from aurarecon.api.server import create_app
from aurarecon.core.crawler import MAX_SCRIPTS
from aurarecon.core.engine import DEFAULT_TIMEOUT, Engine
from aurarecon.core.errors import ScanError
from aurarecon.reporters.console import Log, report


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Aura action reconnaissance scanner")
    mode = p.add_mutually_exclusive_group(required=True)
    mode.add_argument("--url", help="Target page (e.g. https://site.my.site.com/s/)")
    mode.add_argument("--serve", action="store_true",
                      help="Run the HTTP API (POST /scan-url)")
    p.add_argument("--proxy", help="Proxy (e.g. http://127.0.0.1:8080)")
    p.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT,
                   help="Per-request timeout in seconds")
    p.add_argument("--max-scripts", type=int, default=MAX_SCRIPTS,
                   help="Max script resources fetched per scan")
    p.add_argument("--json", action="store_true",
                   help="Print the JSON envelope instead of the report")
    p.add_argument("--host", default="127.0.0.1")
    p.add_argument("--port", type=int, default=8000)
    p.add_argument("-v", "--verbose", action="count", default=1,
                   help="-v, -vv")
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    log = Log(verbose=args.verbose)

    def engine_factory() -> Engine:
        # JSON mode keeps stdout clean for the envelope
        return Engine(proxy=args.proxy, timeout=args.timeout,
                      max_scripts=args.max_scripts,
                      logger=None if args.json else log)

    if args.serve:
        app = create_app(engine_factory, logger=log)
        log.info(f"API listening on http://{args.host}:{args.port}/scan-url")
        app.run(host=args.host, port=args.port)
        return 0

    engine = engine_factory()
    if args.json:
        status, body = asyncio.run(engine.run(args.url))
        print(json.dumps(body, indent=2))
        return 0 if status == 200 else 1

    try:
        result = asyncio.run(engine.scan(args.url))
    except ScanError as exc:
        log.fail(str(exc))
        return 1
    report(result, log)
    return 0


if __name__ == "__main__":
    sys.exit(main())
