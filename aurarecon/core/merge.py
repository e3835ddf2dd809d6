"""Folding per-resource results into one scan result.

Conflict policy per field:

    actions          append-if-absent by (controller, name); an existing
                     entry's parameters are only filled when still empty
    findings         one per id; first excerpt wins, occurrence counts add up
    fwuid/app/token  first found wins (page before scripts)
    api_version      first found wins
    aura_context     first found wins
    endpoints        append-if-absent by path
    components       append-if-absent
"""

from dataclasses import replace
from typing import Iterable, List

from aurarecon.core.models import EnrichedAction, ScanMetadata, VulnerabilityFinding
from aurarecon.parsers.params import infer_parameters, infer_signature_parameters


def merge_actions(existing: List[EnrichedAction],
                  incoming: Iterable[EnrichedAction]) -> List[EnrichedAction]:
    merged = list(existing)
    position = {a.key: i for i, a in enumerate(merged)}
    for action in incoming:
        i = position.get(action.key)
        if i is None:
            position[action.key] = len(merged)
            merged.append(action)
        elif not merged[i].parameters and action.parameters:
            merged[i] = replace(merged[i], parameters=list(action.parameters))
    return merged


def merge_findings(existing: List[VulnerabilityFinding],
                   incoming: Iterable[VulnerabilityFinding]) -> List[VulnerabilityFinding]:
    merged = list(existing)
    position = {f.id: i for i, f in enumerate(merged)}
    for finding in incoming:
        i = position.get(finding.id)
        if i is None:
            position[finding.id] = len(merged)
            merged.append(finding)
        else:
            current = merged[i]
            merged[i] = replace(
                current,
                occurrence_count=current.occurrence_count + finding.occurrence_count,
            )
    return merged


def merge_metadata(base: ScanMetadata, other: ScanMetadata) -> ScanMetadata:
    endpoints = list(base.detected_endpoints)
    seen_paths = {e.path for e in endpoints}
    for ep in other.detected_endpoints:
        if ep.path not in seen_paths:
            seen_paths.add(ep.path)
            endpoints.append(ep)

    components = list(base.loaded_components)
    for comp in other.loaded_components:
        if comp not in components:
            components.append(comp)

    return replace(
        base,
        fwuid=base.fwuid or other.fwuid,
        app=base.app or other.app,
        token=base.token or other.token,
        api_version=base.api_version or other.api_version,
        aura_context=base.aura_context or other.aura_context,
        detected_endpoints=endpoints,
        loaded_components=components,
    )


def fill_missing_parameters(actions: List[EnrichedAction], full_text: str) -> List[EnrichedAction]:
    """Second inference pass over all retrieved text for parameterless actions.

    Known actions keep the knowledge-base schema even when it is empty.
    """
    filled = []
    for action in actions:
        if not action.parameters and not action.is_known:
            params = (infer_signature_parameters(full_text, action.name)
                      or infer_parameters(full_text, action.name))
            if params:
                action = replace(action, parameters=params)
        filled.append(action)
    return filled
