"""Apex source checks: sharing modifiers and dynamic SOQL."""

import re
from typing import List, Pattern

from aurarecon.checkers.base import BaseChecker


class WithoutSharing(BaseChecker):

    id = "AURA-APEX-001"
    name = "Apex class declared without sharing"
    description = ("Apex running 'without sharing' ignores record-level access, so any "
                   "@AuraEnabled method in it returns records the caller cannot see.")
    severity = "high"
    category = "apex-sharing"
    recommendation = ("Declare controllers 'with sharing' (or 'inherited sharing') and "
                      "enforce CRUD/FLS with WITH SECURITY_ENFORCED or stripInaccessible().")

    def __init__(self):
        # Apex keywords are case-insensitive
        self._patterns = [
            re.compile(r"\bwithout\s+sharing\s+class\s+\w+", re.I),
        ]

    def get_patterns(self) -> List[Pattern]:
        return self._patterns


class DynamicSoql(BaseChecker):

    id = "AURA-APEX-002"
    name = "Dynamic SOQL built by string concatenation"
    description = ("A query string is assembled from concatenated values and executed "
                   "dynamically, which enables SOQL/SOSL injection.")
    severity = "high"
    category = "injection"
    recommendation = ("Use bind variables (:name) or Database.queryWithBinds(); if "
                      "concatenation is unavoidable, wrap input in String.escapeSingleQuotes().")

    def __init__(self):
        self._patterns = [
            re.compile(r"Database\.(?:query|countQuery|getQueryLocator)\s*\([^)]*?\+", re.I),
            re.compile(r"Search\.query\s*\([^)]*?\+", re.I),
            re.compile(r"[\"']\s*SELECT\s[^\"']*\bWHERE\b[^\"']*[\"']\s*\+", re.I),
        ]

    def get_patterns(self) -> List[Pattern]:
        return self._patterns
