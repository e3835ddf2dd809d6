"""Session identifier and credential disclosure checks."""

import re
from typing import List, Pattern

from aurarecon.checkers.base import BaseChecker


class SessionIdDisclosure(BaseChecker):

    id = "AURA-SESS-001"
    name = "Session identifier exposed to client code"
    description = ("A Salesforce session ID is rendered into, or read by, client-side "
                   "code where any injected script can steal it.")
    severity = "critical"
    category = "session-disclosure"
    recommendation = ("Never render $Api.Session_ID or UserInfo.getSessionId() into pages; "
                      "call APIs server-side or use Named Credentials.")

    def __init__(self):
        self._patterns = [
            re.compile(r"\{!\s*\$Api\.Session_ID\s*\}", re.I),
            re.compile(r"UserInfo\.getSessionId\s*\(\s*\)", re.I),
            re.compile(r"[\"']?\b(?:sid|sessionId)[\"']?\s*[:=]\s*[\"'][A-Za-z0-9!._]{20,}[\"']"),
        ]

    def get_patterns(self) -> List[Pattern]:
        return self._patterns


class HardcodedCredential(BaseChecker):

    id = "AURA-CRED-001"
    name = "Hard-coded credential or secret"
    description = "A password, client secret or API key literal is shipped in retrieved content."
    severity = "high"
    category = "credential-disclosure"
    recommendation = ("Rotate the exposed secret and move it to Named Credentials, "
                      "protected custom metadata or a server-side secret store.")

    def __init__(self):
        self._patterns = [
            re.compile(r"(?i)\b(?:password|passwd|pwd|client_secret|api[_-]?key|secret[_-]?key)"
                       r"[\"']?\s*[:=]\s*[\"'][^\"'\s]{6,}[\"']"),
            re.compile(r"(?<![A-Z0-9])AKIA[0-9A-Z]{16}(?![A-Z0-9])"),
        ]

    def get_patterns(self) -> List[Pattern]:
        return self._patterns
