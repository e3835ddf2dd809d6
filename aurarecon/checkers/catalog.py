"""Versioned vulnerability pattern catalog."""

from typing import List, Tuple

from aurarecon.checkers.apex import DynamicSoql, WithoutSharing
from aurarecon.checkers.base import BaseChecker
from aurarecon.checkers.disclosure import HardcodedCredential, SessionIdDisclosure
from aurarecon.checkers.dom import UnsafeHtmlSink
from aurarecon.checkers.messaging import MessageListenerWithoutOriginCheck, WildcardPostMessage
from aurarecon.core.models import VulnerabilityFinding

CATALOG_VERSION = "1.0"

# Checkers hold only compiled patterns, so one instance serves every scan.
CHECKS: Tuple[BaseChecker, ...] = (
    WildcardPostMessage(),
    MessageListenerWithoutOriginCheck(),
    WithoutSharing(),
    DynamicSoql(),
    SessionIdDisclosure(),
    HardcodedCredential(),
    UnsafeHtmlSink(),
)


def detect(text: str) -> List[VulnerabilityFinding]:
    """Run every catalog entry over *text*; at most one finding per id."""
    findings = []
    for chk in CHECKS:
        finding = chk.check(text)
        if finding is not None:
            findings.append(finding)
    return findings
