"""Attach schema, category and risk to bare action descriptors."""

from typing import Optional, Tuple

from aurarecon.core.knowledge import lookup
from aurarecon.core.models import ActionDescriptor, EnrichedAction
from aurarecon.parsers.params import infer_parameters, infer_signature_parameters


# ── Heuristic keyword tables (ordered, first hit wins) ─────────

# (substrings of the action name, risk level, weakness note)
_RISK_RULES: Tuple[Tuple[Tuple[str, ...], str, str], ...] = (
    (("delete", "remove"), "critical",
     "Destructive operation exposed to the client; verify the guest profile cannot reach it"),
    (("update", "save", "create", "insert"), "high",
     "Write operation exposed to the client; CRUD/FLS must be enforced in Apex"),
    (("get", "fetch", "load", "read"), "medium",
     "Read operation; check for record disclosure through enumerable IDs"),
    (("search", "find"), "medium",
     "Search operation; wildcard terms may enumerate records"),
)

# (substrings of the controller name, category)
_CATEGORY_RULES: Tuple[Tuple[Tuple[str, ...], str], ...] = (
    (("login", "auth"), "auth"),
    (("cart", "commerce", "product"), "commerce"),
    (("community", "site"), "community"),
    (("record", "sobject"), "record"),
    (("chat", "chatter", "messaging"), "chat"),
)


def classify_risk(action_name: str) -> Tuple[str, Optional[str]]:
    lower = action_name.lower()
    for keywords, risk, weakness in _RISK_RULES:
        if any(k in lower for k in keywords):
            return risk, weakness
    return "unknown", None


def classify_category(controller: str) -> str:
    lower = controller.lower()
    for keywords, category in _CATEGORY_RULES:
        if any(k in lower for k in keywords):
            return category
    return "custom"


def enrich(descriptor: ActionDescriptor, surrounding_text: str) -> EnrichedAction:
    """Resolve *descriptor* against the knowledge base, else classify heuristically.

    Never raises: missing information degrades to ``unknown``/``custom``.
    """
    hit = lookup(descriptor.controller, descriptor.name)
    if hit is not None:
        controller, action = hit
        return EnrichedAction(
            controller=descriptor.controller,
            name=descriptor.name,
            descriptor=descriptor.descriptor,
            source_syntax=descriptor.source_syntax,
            return_type=action.return_type,
            parameters=[p.to_parameter() for p in action.params],
            category=controller.category,
            risk_level=action.risk_level,
            description=action.description,
            is_known=True,
            requires_auth=action.requires_auth,
            known_weaknesses=list(action.weaknesses),
        )

    params = (infer_signature_parameters(surrounding_text, descriptor.name)
              or infer_parameters(surrounding_text, descriptor.name))
    risk, weakness = classify_risk(descriptor.name)

    return EnrichedAction(
        controller=descriptor.controller,
        name=descriptor.name,
        descriptor=descriptor.descriptor,
        source_syntax=descriptor.source_syntax,
        return_type="Object",
        parameters=params,
        category=classify_category(descriptor.controller),
        risk_level=risk,
        description=f"Custom Apex action: {descriptor.controller}.{descriptor.name}",
        is_known=False,
        requires_auth=risk in ("high", "critical"),
        known_weaknesses=[weakness] if weakness else [],
    )
