"""Aura remote-action descriptor extraction.

Three syntaxes reference the same thing, a controller method callable
through the Aura endpoint:

    aura://RecordUiController/ACTION$getRecordWithFields
    apex://MyController/ACTION$doWork
    serviceComponent://ui.force.components.controllers.foo.FooController/ACTION$bar
    serviceComponent://ui.comm.getThing            (short dotted form)
"""

import re
from typing import Callable, Dict, List, NamedTuple, Pattern, Tuple

from aurarecon.core.models import ActionDescriptor


class _Matcher(NamedTuple):
    syntax: str
    pattern: Pattern
    build: Callable[["re.Match"], ActionDescriptor]


def _from_scheme(scheme: str) -> Callable[["re.Match"], ActionDescriptor]:
    def build(m: "re.Match") -> ActionDescriptor:
        controller, action = m.group(1), m.group(2)
        return ActionDescriptor(controller, action,
                                f"{scheme}://{controller}/ACTION${action}", scheme)
    return build


def _from_service_full(m: "re.Match") -> ActionDescriptor:
    return ActionDescriptor(m.group(2), m.group(3), m.group(0), "service")


def _from_service_short(m: "re.Match") -> ActionDescriptor:
    controller, action = m.group(1), m.group(2)
    return ActionDescriptor(controller, action,
                            f"serviceComponent://ui.{controller}.{action}", "service")


# Order matters: results are emitted matcher by matcher.
_MATCHERS: Tuple[_Matcher, ...] = (
    _Matcher("aura",
             re.compile(r"aura://([^/\s\"'<>]+)/ACTION\$([A-Za-z0-9_]+)"),
             _from_scheme("aura")),
    _Matcher("apex",
             re.compile(r"apex://([^/\s\"'<>]+)/ACTION\$([A-Za-z0-9_]+)"),
             _from_scheme("apex")),
    _Matcher("service",
             re.compile(r"serviceComponent://ui\.((?:[A-Za-z0-9_]+\.)*)([A-Za-z0-9_]+)"
                        r"/ACTION\$([A-Za-z0-9_]+)"),
             _from_service_full),
    _Matcher("service",
             re.compile(r"serviceComponent://ui\.([A-Za-z0-9_]+)\.([A-Za-z0-9_]+)(?![\w./])"),
             _from_service_short),
)


def extract_descriptors(text: str) -> List[ActionDescriptor]:
    """Return every distinct action descriptor in *text*.

    Identity is ``(controller, name)``; the first sighting wins regardless of
    which syntax produced it.
    """
    found: Dict[Tuple[str, str], ActionDescriptor] = {}
    if not text:
        return []

    for matcher in _MATCHERS:
        for m in matcher.pattern.finditer(text):
            desc = matcher.build(m)
            if desc.key not in found:
                found[desc.key] = desc

    return list(found.values())
