"""Static catalog of known Aura controllers, their actions and API endpoints.

Built once at import time and exposed read-only; nothing writes to these
tables after that, so concurrent scans share them freely.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from aurarecon.core.models import ActionParameter, DetectedEndpoint


@dataclass(frozen=True)
class KnownParam:
    name: str
    type: str
    required: bool
    description: str

    def to_parameter(self) -> ActionParameter:
        return ActionParameter(self.name, self.type, self.required,
                               self.description, provenance="known")


@dataclass(frozen=True)
class KnownAction:
    params: Tuple[KnownParam, ...]
    return_type: str
    risk_level: str
    description: str
    requires_auth: bool
    weaknesses: Tuple[str, ...] = ()


@dataclass(frozen=True)
class KnownController:
    description: str
    category: str
    risk_level: str
    actions: Mapping[str, KnownAction]


# ── Builders ───────────────────────────────────────────────────

def _p(name: str, type_: str, required: bool, description: str) -> KnownParam:
    return KnownParam(name, type_, required, description)


def _a(params, return_type, risk, description, weaknesses=(), requires_auth=None) -> KnownAction:
    if requires_auth is None:
        requires_auth = risk in ("high", "critical")
    return KnownAction(tuple(params), return_type, risk, description,
                       requires_auth, tuple(weaknesses))


def _c(description, category, risk, **actions) -> KnownController:
    return KnownController(description, category, risk, MappingProxyType(actions))


_IDOR = "Record IDs are enumerable; guest profiles with broad sharing leak other users' records"
_FLS = "Field-level security is only enforced if the guest profile is locked down"
_WRITE = "Write access for the guest user lets anonymous visitors modify data"


# ── Controllers ────────────────────────────────────────────────

KNOWN_CONTROLLERS: Mapping[str, KnownController] = MappingProxyType({
    "RecordUiController": _c(
        "Record UI operations - view, create, update records", "record", "medium",
        getRecordWithFields=_a(
            [_p("recordId", "Id", True, "Salesforce record ID"),
             _p("fields", "List<String>", True, "Fields to retrieve")],
            "RecordUiResponse", "medium", "Get record data with specified fields",
            [_IDOR, _FLS]),
        getRecordCreateDefaults=_a(
            [_p("objectApiName", "String", True, "Object API name"),
             _p("recordTypeId", "Id", False, "Record type ID")],
            "RecordDefaults", "low", "Get default values for new record creation"),
        getRecordUi=_a(
            [_p("recordIds", "List<Id>", True, "List of record IDs"),
             _p("layoutTypes", "List<String>", False, "Layout types to retrieve"),
             _p("modes", "List<String>", False, "View/Edit modes")],
            "RecordUiResponse", "medium", "Get full record UI data including layouts",
            [_IDOR]),
        getObjectInfo=_a(
            [_p("objectApiName", "String", True, "Object API name")],
            "ObjectInfo", "low", "Get object metadata and field definitions",
            ["Discloses object and field names to unauthenticated users"]),
        updateRecord=_a(
            [_p("recordId", "Id", True, "Record to update"),
             _p("fields", "Map<String, Object>", True, "Field values to update")],
            "RecordUiResponse", "high", "Update record fields",
            [_WRITE, _IDOR]),
        createRecord=_a(
            [_p("objectApiName", "String", True, "Object API name"),
             _p("fields", "Map<String, Object>", True, "Field values")],
            "RecordUiResponse", "high", "Create new record",
            [_WRITE]),
        deleteRecord=_a(
            [_p("recordId", "Id", True, "Record to delete")],
            "Boolean", "critical", "Delete a record",
            ["Guest users with delete permission can destroy arbitrary records", _IDOR]),
    ),
    "ApexActionController": _c(
        "Execute custom Apex methods marked with @AuraEnabled", "apex", "critical",
        execute=_a(
            [_p("namespace", "String", False, "Apex namespace"),
             _p("classname", "String", True, "Apex class name"),
             _p("method", "String", True, "Method name"),
             _p("params", "Map<String, Object>", False, "Method parameters"),
             _p("cacheable", "Boolean", False, "Cache response")],
            "Object", "critical", "Execute @AuraEnabled Apex method",
            ["Reaches every @AuraEnabled method the guest profile can see",
             "Apex declared without sharing ignores record-level access"]),
    ),
    "ListUiController": _c(
        "List view operations", "ui", "medium",
        getListUi=_a(
            [_p("objectApiName", "String", True, "Object API name"),
             _p("listViewApiName", "String", False, "List view name"),
             _p("pageSize", "Integer", False, "Records per page"),
             _p("pageToken", "String", False, "Pagination token")],
            "ListUiResponse", "medium", "Get list view UI data",
            ["Bulk record disclosure through list views shared with guests"]),
        getListsByObjectName=_a(
            [_p("objectApiName", "String", True, "Object API name")],
            "List<ListView>", "low", "Get available list views for object"),
    ),
    "LookupController": _c(
        "Lookup field search operations", "ui", "medium",
        getRecordTypeInfos=_a(
            [_p("objectApiName", "String", True, "Object API name")],
            "List<RecordTypeInfo>", "low", "Get record types for object"),
        search=_a(
            [_p("searchTerm", "String", True, "Search query"),
             _p("objectApiName", "String", True, "Object to search"),
             _p("fieldApiName", "String", False, "Field to search"),
             _p("maxResults", "Integer", False, "Max results")],
            "List<LookupResult>", "medium", "Search for lookup values",
            ["Wildcard searches enumerate records visible to the guest user"]),
    ),
    "ActionsController": _c(
        "Quick actions and global actions", "ui", "high",
        getActions=_a(
            [_p("recordId", "Id", False, "Record ID for context"),
             _p("objectApiName", "String", False, "Object API name")],
            "List<Action>", "low", "Get available actions"),
        invokeAction=_a(
            [_p("actionApiName", "String", True, "Action to invoke"),
             _p("recordId", "Id", False, "Record context"),
             _p("params", "Map<String, Object>", False, "Action params")],
            "ActionResult", "high", "Invoke a quick action",
            ["Quick actions run with the action's own permissions"]),
    ),
    "NavigationController": _c(
        "Navigation and URL generation", "system", "low",
        generateUrl=_a(
            [_p("pageReference", "PageReference", True, "Page reference object")],
            "String", "low", "Generate URL from page reference"),
    ),
    "CommunityNavigationController": _c(
        "Experience Cloud navigation", "community", "low",
        getNavigationMenuItems=_a(
            [_p("menuName", "String", True, "Navigation menu name"),
             _p("publishedState", "String", False, "Published state filter")],
            "List<NavigationMenuItem>", "low", "Get navigation menu items"),
    ),
    "CommunityLoginController": _c(
        "Community/Experience Cloud login", "auth", "high",
        login=_a(
            [_p("username", "String", True, "Username"),
             _p("password", "String", True, "Password"),
             _p("startUrl", "String", False, "Redirect URL after login")],
            "LoginResult", "critical", "Authenticate user",
            ["No lockout on the Aura endpoint enables password spraying",
             "Unvalidated startUrl can be abused as an open redirect"],
            requires_auth=False),
        getSelfRegisterUrl=_a(
            [], "String", "low", "Get self-registration URL"),
        getForgotPasswordUrl=_a(
            [], "String", "low", "Get forgot password URL"),
    ),
    "WireAdapter": _c(
        "Wire service data adapter", "data", "high",
        query=_a(
            [_p("query", "String", True, "SOQL query string")],
            "QueryResult", "critical", "Execute SOQL query",
            ["Arbitrary SOQL exposes any object the guest profile can read"]),
    ),
    "CartController": _c(
        "B2B/B2C Commerce cart operations", "commerce", "high",
        getCart=_a(
            [_p("cartId", "Id", False, "Cart ID"),
             _p("effectiveAccountId", "Id", False, "Account context")],
            "Cart", "medium", "Get cart details",
            [_IDOR]),
        addToCart=_a(
            [_p("productId", "Id", True, "Product to add"),
             _p("quantity", "Integer", True, "Quantity"),
             _p("cartId", "Id", False, "Cart ID")],
            "CartItem", "medium", "Add item to cart"),
        updateCartItem=_a(
            [_p("cartItemId", "Id", True, "Cart item ID"),
             _p("quantity", "Integer", True, "New quantity")],
            "CartItem", "medium", "Update cart item quantity",
            ["Negative or oversized quantities may bypass pricing rules"]),
        deleteCartItem=_a(
            [_p("cartItemId", "Id", True, "Cart item to remove")],
            "Boolean", "medium", "Remove item from cart"),
        checkout=_a(
            [_p("cartId", "Id", True, "Cart to checkout")],
            "CheckoutResult", "high", "Initiate checkout process",
            ["Checkout of another user's cart when cart IDs are guessable"]),
    ),
    "ProductController": _c(
        "Commerce product operations", "commerce", "medium",
        getProduct=_a(
            [_p("productId", "Id", True, "Product ID")],
            "Product", "low", "Get product details"),
        searchProducts=_a(
            [_p("searchTerm", "String", True, "Search query"),
             _p("categoryId", "Id", False, "Category filter"),
             _p("pageSize", "Integer", False, "Results per page")],
            "ProductSearchResult", "low", "Search products"),
    ),
    "ChatterController": _c(
        "Chatter feed operations", "ui", "medium",
        getFeed=_a(
            [_p("feedType", "String", True, "Feed type (News, Record, etc.)"),
             _p("subjectId", "Id", False, "Subject record ID")],
            "ChatterFeed", "medium", "Get Chatter feed",
            ["Internal feed posts visible to guest users"]),
        postFeedElement=_a(
            [_p("subjectId", "Id", True, "Feed subject"),
             _p("text", "String", True, "Post content")],
            "FeedElement", "high", "Create feed post",
            ["Stored content injection through feed posts"]),
    ),
    "ContentController": _c(
        "Content document operations", "data", "high",
        getContentDocumentLink=_a(
            [_p("contentDocumentId", "Id", True, "Document ID")],
            "ContentDocumentLink", "medium", "Get document link",
            ["Public document links shared beyond the intended audience"]),
        uploadFile=_a(
            [_p("base64Data", "String", True, "File content (base64)"),
             _p("fileName", "String", True, "File name"),
             _p("recordId", "Id", False, "Parent record")],
            "ContentVersion", "high", "Upload file attachment",
            ["Unrestricted file upload by anonymous users"]),
        deleteFile=_a(
            [_p("contentDocumentId", "Id", True, "Document to delete")],
            "Boolean", "critical", "Delete content document",
            ["Anonymous deletion of shared documents"]),
    ),
})


# ── API endpoints ──────────────────────────────────────────────

KNOWN_ENDPOINTS: Tuple[DetectedEndpoint, ...] = (
    DetectedEndpoint("/s/sfsites/aura", "aura", "high", "Aura Framework endpoint"),
    DetectedEndpoint("/aura", "aura", "high", "Classic Aura endpoint"),
    DetectedEndpoint("/services/data/", "rest", "medium", "REST API"),
    DetectedEndpoint("/services/apexrest/", "apex-rest", "high", "Apex REST"),
    DetectedEndpoint("/services/Soap/", "soap", "medium", "SOAP API"),
    DetectedEndpoint("/services/async/", "bulk", "medium", "Bulk API"),
    DetectedEndpoint("/cometd/", "streaming", "low", "Streaming API"),
    DetectedEndpoint("/connect/", "connect", "low", "Connect API"),
)


def lookup(controller: str, action: str) -> Optional[Tuple[KnownController, KnownAction]]:
    """Exact controller+action lookup; None when either is unknown."""
    known = KNOWN_CONTROLLERS.get(controller)
    if known is None:
        return None
    entry = known.actions.get(action)
    if entry is None:
        return None
    return known, entry
