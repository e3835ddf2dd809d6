"""Shared data models for the Aura action scanner."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class ActionDescriptor:
    """A bare remote-action reference found in retrieved text."""
    controller: str
    name: str
    descriptor: str
    source_syntax: str     # "aura", "apex", "service"

    @property
    def key(self) -> Tuple[str, str]:
        return (self.controller, self.name)


@dataclass
class ActionParameter:
    name: str
    type: str
    required: bool = True
    description: str = ""
    provenance: str = "context"   # "known", "signature", "context"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "required": self.required,
            "description": self.description,
            "provenance": self.provenance,
        }


@dataclass
class EnrichedAction:
    """A descriptor with schema, category and risk attached."""
    controller: str
    name: str
    descriptor: str
    source_syntax: str
    return_type: str = "Object"
    parameters: List[ActionParameter] = field(default_factory=list)
    category: str = "custom"
    risk_level: str = "unknown"
    description: str = ""
    is_known: bool = False
    requires_auth: bool = False
    known_weaknesses: List[str] = field(default_factory=list)

    @property
    def key(self) -> Tuple[str, str]:
        return (self.controller, self.name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "controller": self.controller,
            "name": self.name,
            "descriptor": self.descriptor,
            "sourceSyntax": self.source_syntax,
            "returnType": self.return_type,
            "parameters": [p.to_dict() for p in self.parameters],
            "category": self.category,
            "riskLevel": self.risk_level,
            "description": self.description,
            "isKnown": self.is_known,
            "requiresAuth": self.requires_auth,
            "knownWeaknesses": list(self.known_weaknesses),
        }

    def __str__(self):
        return (f"[{self.risk_level.upper()}] {self.controller}.{self.name} "
                f"({len(self.parameters)} params, {self.category})")


@dataclass
class VulnerabilityFinding:
    """One catalog pattern matched in retrieved content."""
    id: str
    name: str
    description: str
    severity: str          # "critical", "high", "medium", "low", "info"
    category: str
    matched_excerpt: str
    recommendation: str
    occurrence_count: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "severity": self.severity,
            "category": self.category,
            "matchedExcerpt": self.matched_excerpt,
            "recommendation": self.recommendation,
            "occurrenceCount": self.occurrence_count,
        }

    def __str__(self):
        return (f"[{self.severity.upper()}] {self.id} {self.name} "
                f"x{self.occurrence_count}: {self.matched_excerpt!r}")


@dataclass
class SessionCookie:
    name: str
    value: str
    domain: str = ""
    path: str = "/"
    secure: bool = False
    http_only: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "value": self.value,
            "domain": self.domain,
            "path": self.path,
            "secure": self.secure,
            "httpOnly": self.http_only,
        }


@dataclass
class GuestSession:
    cookies: List[SessionCookie] = field(default_factory=list)
    raw_header: str = ""
    session_type: str = "unknown"   # "guest", "authenticated", "unknown"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cookies": [c.to_dict() for c in self.cookies],
            "rawCookieHeader": self.raw_header,
            "sessionType": self.session_type,
        }


@dataclass(frozen=True)
class DetectedEndpoint:
    path: str
    type: str
    risk_level: str
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "type": self.type,
            "riskLevel": self.risk_level,
            "description": self.description,
        }


@dataclass
class AuraContext:
    """Reconstructed `aura.context` object, as sent with every Aura POST."""
    mode: str
    fwuid: str
    app: str
    loaded: Dict[str, str] = field(default_factory=dict)
    dn: List[str] = field(default_factory=list)
    globals: Dict[str, Any] = field(default_factory=dict)
    uad: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode,
            "fwuid": self.fwuid,
            "app": self.app,
            "loaded": dict(self.loaded),
            "dn": list(self.dn),
            "globals": dict(self.globals),
            "uad": self.uad,
        }


@dataclass
class ScanMetadata:
    fwuid: Optional[str] = None
    app: Optional[str] = None
    token: Optional[str] = None
    scanned_url: str = ""
    api_version: Optional[str] = None
    loaded_components: List[str] = field(default_factory=list)
    detected_endpoints: List[DetectedEndpoint] = field(default_factory=list)
    aura_context: Optional[AuraContext] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fwuid": self.fwuid,
            "app": self.app,
            "token": self.token,
            "scannedUrl": self.scanned_url,
            "apiVersion": self.api_version,
            "loadedComponents": list(self.loaded_components),
            "detectedEndpoints": [e.to_dict() for e in self.detected_endpoints],
            "auraContext": self.aura_context.to_dict() if self.aura_context else None,
        }


@dataclass
class ScanResult:
    """Consolidated output of one scan."""
    controllers: List[EnrichedAction] = field(default_factory=list)
    metadata: ScanMetadata = field(default_factory=ScanMetadata)
    guest_session: GuestSession = field(default_factory=GuestSession)
    vulnerabilities: List[VulnerabilityFinding] = field(default_factory=list)
    js_files_scanned: int = 0
    page_size: int = 0
    scan_duration: int = 0  # ms
    warnings: List[str] = field(default_factory=list)
    success: bool = True

    @property
    def raw_matches(self) -> int:
        return len(self.controllers)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "rawMatches": self.raw_matches,
            "controllers": [a.to_dict() for a in self.controllers],
            "metadata": self.metadata.to_dict(),
            "guestSession": self.guest_session.to_dict(),
            "vulnerabilities": [v.to_dict() for v in self.vulnerabilities],
            "jsFilesScanned": self.js_files_scanned,
            "pageSize": self.page_size,
            "scanDuration": self.scan_duration,
            "warnings": list(self.warnings),
        }


@dataclass
class ScriptFetch:
    """Per-branch result slot for one script resource fetch."""
    url: str
    text: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
