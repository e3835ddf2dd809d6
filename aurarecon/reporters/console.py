from colorama import init as colorama_init, Fore, Style
from datetime import datetime

from aurarecon.core.models import EnrichedAction, ScanResult, VulnerabilityFinding
from aurarecon.core.session import validate_session

colorama_init(autoreset=True)

_RISK_COLORS = {
    "critical": Fore.RED + Style.BRIGHT,
    "high": Fore.RED,
    "medium": Fore.YELLOW,
    "low": Fore.GREEN,
}


class Log:
    def __init__(self, verbose: int = 1):
        self.verbose = verbose
        self.HL = Fore.MAGENTA

    def _time(self):
        return datetime.now().strftime("[%H:%M:%S]")

    def _fmt(self, level: str, color: str):
        return f"{self._time()} {color}[{level}]{Style.RESET_ALL}"

    def info(self, msg: str):
        if self.verbose >= 1:
            print(f"{self._fmt('INFO', Fore.CYAN)} {msg}")

    def warn(self, msg: str):
        if self.verbose >= 0:
            print(f"{self._fmt('WARNING', Fore.YELLOW)} {msg}")

    def ok(self, msg: str):
        print(f"{self._fmt('SUCCESS', Fore.GREEN)} {msg}")

    def fail(self, msg: str):
        print(f"{self._fmt('FAIL', Fore.RED)} {msg}")

    def debug(self, msg: str):
        if self.verbose >= 2:
            print(f"{self._fmt('DEBUG', Fore.MAGENTA)} {msg}")

    def action(self, act: EnrichedAction):
        col = _RISK_COLORS.get(act.risk_level, Fore.WHITE)
        known = "known" if act.is_known else "inferred"
        params = ", ".join(f"{p.name}:{p.type}" for p in act.parameters) or "-"
        print(f"{self._fmt(act.risk_level.upper(), col)} "
              f"{self.HL}{act.controller}{Style.RESET_ALL}.{act.name} "
              f"{Style.DIM}[{act.category}/{known}] ({params}){Style.RESET_ALL}")

    def finding(self, f: VulnerabilityFinding):
        col = _RISK_COLORS.get(f.severity, Fore.WHITE)
        print(f"{self._fmt(f.severity.upper(), col)} {f.id} {f.name} "
              f"{Style.DIM}x{f.occurrence_count}{Style.RESET_ALL} "
              f"{Fore.MAGENTA}{f.matched_excerpt}{Style.RESET_ALL}")


def report(result: ScanResult, log: Log):
    """Human-readable summary of a finished scan."""
    meta = result.metadata
    log.info(f"Target: {meta.scanned_url} ({result.page_size} bytes, "
             f"{result.js_files_scanned} scripts, {result.scan_duration} ms)")
    log.info(f"fwuid={meta.fwuid or '-'} app={meta.app or '-'} "
             f"token={'yes' if meta.token else 'no'} api={meta.api_version or '-'}")
    for ep in meta.detected_endpoints:
        log.info(f"Endpoint {ep.path} ({ep.type}, {ep.risk_level})")

    session = result.guest_session
    check = validate_session(meta, session)
    log.info(f"Session: {session.session_type}, {len(session.cookies)} cookies")
    if not check.ready:
        log.warn(f"Replay context incomplete, missing: {', '.join(check.missing())}")

    for w in result.warnings:
        log.warn(w)

    if not result.controllers:
        log.fail("No Aura actions found")
    for act in result.controllers:
        log.action(act)

    for f in result.vulnerabilities:
        log.finding(f)

    log.ok(f"{result.raw_matches} actions, {len(result.vulnerabilities)} findings")
