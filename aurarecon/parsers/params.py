"""Heuristic parameter reconstruction for actions missing from the knowledge base."""

import re
from typing import Callable, List, Set, Tuple

from aurarecon.core.models import ActionParameter

# How far past an action name a setParams() call may appear; nearest call wins
CONTEXT_WINDOW = 1000

_PARAM_KEY = re.compile(r"[\"']?(\w+)[\"']?\s*:\s*([^,}]+)")

_INTEGER = re.compile(r"^\d+$")
_DECIMAL = re.compile(r"^\d+\.\d+$")
_QUOTED = re.compile(r"^[\"'].*[\"']$", re.S)
_ID_VALUE = re.compile(r"recordId|Id$")
_REFERENCE = re.compile(r"\.(\w+)$")


def _is_id(name: str, value: str) -> bool:
    return (name.endswith("Id") or "recordid" in name.lower()
            or bool(_ID_VALUE.search(value)))


# First matching rule wins; order is declaration order, not specificity.
_TYPE_RULES: Tuple[Tuple[str, Callable[[str, str], bool]], ...] = (
    ("Boolean", lambda n, v: v in ("true", "false")),
    ("Integer", lambda n, v: bool(_INTEGER.match(v))),
    ("Decimal", lambda n, v: bool(_DECIMAL.match(v))),
    ("String", lambda n, v: bool(_QUOTED.match(v))),
    ("List<Object>", lambda n, v: v.startswith("[")),
    ("Map<String, Object>", lambda n, v: v.startswith("{")),
    ("Id", _is_id),
    ("Reference", lambda n, v: bool(_REFERENCE.search(v))),
)


def infer_type(name: str, value: str) -> str:
    value = value.strip()
    for type_name, rule in _TYPE_RULES:
        if rule(name, value):
            return type_name
    return "Object"


def infer_parameters(text: str, action_name: str) -> List[ActionParameter]:
    """Rebuild parameters from ``setParams({...})`` calls following *action_name*.

    Every occurrence of the name is considered; a key seen twice keeps its
    first inferred type. Returns ``[]`` when no such call exists.
    """
    if not text or not action_name:
        return []

    context = re.compile(
        re.escape(action_name)
        + r"[\s\S]{0,%d}?setParams?\s*\(\s*\{([^}]+)\}" % CONTEXT_WINDOW,
        re.I,
    )
    params: List[ActionParameter] = []
    seen: Set[str] = set()

    for m in context.finditer(text):
        for key_m in _PARAM_KEY.finditer(m.group(1)):
            name = key_m.group(1)
            if name in seen:
                continue
            seen.add(name)
            params.append(ActionParameter(
                name=name,
                type=infer_type(name, key_m.group(2)),
                required=True,
                description="Inferred parameter",
                provenance="context",
            ))
    return params


# ── Apex signatures ────────────────────────────────────────────

_MODIFIERS = r"(?:(?:public|global|static|override|virtual)\s+)+"


def _split_args(args: str) -> List[str]:
    """Split an argument list on top-level commas (generics contain commas)."""
    parts, depth, current = [], 0, []
    for ch in args:
        if ch == "<":
            depth += 1
        elif ch == ">":
            depth -= 1
        if ch == "," and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(ch)
    parts.append("".join(current))
    return [p.strip() for p in parts if p.strip()]


def infer_signature_parameters(text: str, action_name: str) -> List[ActionParameter]:
    """Read parameters off an ``@AuraEnabled`` Apex method declaration."""
    if not text or not action_name:
        return []

    signature = re.compile(
        r"@AuraEnabled(?:\s*\([^)]*\))?\s+" + _MODIFIERS
        + r"[\w<>,.\s]+?\s+" + re.escape(action_name) + r"\s*\(([^)]*)\)",
        re.I,
    )
    m = signature.search(text)
    if not m:
        return []

    params: List[ActionParameter] = []
    for arg in _split_args(m.group(1)):
        tokens = arg.replace("final ", "").rsplit(None, 1)
        if len(tokens) != 2:
            continue
        params.append(ActionParameter(
            name=tokens[1],
            type=tokens[0].strip(),
            required=True,
            description="From @AuraEnabled signature",
            provenance="signature",
        ))
    return params
