"""Cross-origin messaging checks (window.postMessage and its listeners)."""

import re
from typing import List, Pattern

from aurarecon.checkers.base import BaseChecker


class WildcardPostMessage(BaseChecker):

    id = "AURA-XO-001"
    name = "postMessage with wildcard target origin"
    description = ("Data is posted to another window with targetOrigin '*', so any "
                   "page framing or opening this one can read it.")
    severity = "high"
    category = "cross-origin-messaging"
    recommendation = ("Pass the exact expected origin as targetOrigin instead of '*', "
                      "e.g. window.parent.postMessage(data, 'https://partner.example.com').")

    def __init__(self):
        self._patterns = [
            # one level of nested parentheses covers JSON.stringify(...) payloads
            re.compile(r"\bpostMessage\s*\((?:[^;()]|\([^()]*\))*?,\s*[\"']\*[\"']"),
        ]

    def get_patterns(self) -> List[Pattern]:
        return self._patterns


class MessageListenerWithoutOriginCheck(BaseChecker):
    """
    A 'message' handler that never looks at event.origin accepts input from
    any window. The handler body is approximated by a fixed window of text
    after the registration.
    """

    id = "AURA-XO-002"
    name = "Message listener without origin validation"
    description = ("A window 'message' event handler processes data without checking "
                   "event.origin, allowing any cross-origin page to drive it.")
    severity = "medium"
    category = "cross-origin-messaging"
    recommendation = ("Compare event.origin against an allow-list before using "
                      "event.data, and ignore messages from unexpected origins.")

    BODY_WINDOW = 400

    def __init__(self):
        self._patterns = [
            re.compile(r"addEventListener\s*\(\s*[\"']message[\"']"),
            re.compile(r"\bonmessage\s*=(?!=)"),
        ]
        self._origin = re.compile(r"\borigin\b")

    def get_patterns(self) -> List[Pattern]:
        return self._patterns

    def find_matches(self, text: str) -> List[str]:
        matches = []
        for rx in self._patterns:
            for m in rx.finditer(text):
                body = text[m.start():m.end() + self.BODY_WINDOW]
                if not self._origin.search(body):
                    matches.append(body[:80])
        return matches
