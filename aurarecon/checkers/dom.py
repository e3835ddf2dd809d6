"""Raw HTML sink check for Aura/LWC component code."""

import re
from typing import List, Pattern

from aurarecon.checkers.base import BaseChecker


class UnsafeHtmlSink(BaseChecker):

    id = "AURA-DOM-001"
    name = "Raw HTML sink in component code"
    description = ("Markup is written through innerHTML-style sinks or lwc:dom=\"manual\", "
                   "bypassing Locker/LWS template escaping.")
    severity = "medium"
    category = "dom-injection"
    recommendation = ("Render through templates or lightning-formatted-rich-text; sanitise "
                      "any HTML that must be injected manually.")

    def __init__(self):
        self._patterns = [
            re.compile(r"\.(?:inner|outer)HTML\s*=(?!=)"),
            re.compile(r"\binsertAdjacentHTML\s*\("),
            re.compile(r"lwc:dom\s*=\s*[\"']manual[\"']"),
        ]

    def get_patterns(self) -> List[Pattern]:
        return self._patterns
