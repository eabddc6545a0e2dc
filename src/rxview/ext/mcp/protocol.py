"""JSON-RPC envelope, tool-call arguments and the fixed tool catalog.

Wire shapes:
    request   {"jsonrpc": "2.0", "method": str, "params"?: object, "id"?: str|number|null}
    response  {"jsonrpc": "2.0", "id": ..., "result": ...}
              {"jsonrpc": "2.0", "id": ..., "error": {"code", "message", "data"?}}
    tool      {"content": [{"type": "text", "text": str}], "isError"?: true}
"""

from __future__ import annotations

import math
from typing import Any

import orjson
from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, field_validator
from pydantic.alias_generators import to_camel

from rxview.foundation.errors import RpcErrorCode
from rxview.models import SearchQuery

JSONRPC_VERSION = "2.0"
PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "rxview-drug-server"
SERVER_VERSION = "1.0.0"
DEFAULT_SEARCH_LIMIT = 20
MAX_SEARCH_LIMIT = 100

RequestId = StrictStr | StrictInt | StrictFloat | None


class JsonRpcRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    jsonrpc: str = JSONRPC_VERSION
    method: str
    params: dict[str, Any] | None = None
    id: RequestId = None


class ToolCall(BaseModel):
    """``tools/call`` params."""

    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


class DrugNameArgs(BaseModel):
    """Arguments of get_drug_by_name and get_enhanced_sections."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    drug_name: str = Field(min_length=1)
    generic_name: str | None = None


class SearchArgs(BaseModel):
    """Arguments of search_drugs.

    Lenient where SearchQuery is strict: missing, null, non-numeric or
    non-positive page and limit fall back to 1 and 20, fractional numbers are
    truncated, and limit is clamped to MAX_SEARCH_LIMIT.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    query: str | None = None
    labeler: str | None = None
    page: int = 1
    limit: int = DEFAULT_SEARCH_LIMIT

    @field_validator("query", "labeler", mode="before")
    @classmethod
    def _text(cls, v: Any) -> str | None:
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("page", mode="before")
    @classmethod
    def _page(cls, v: Any) -> int:
        return _positive_int(v) or 1

    @field_validator("limit", mode="before")
    @classmethod
    def _limit(cls, v: Any) -> int:
        return min(_positive_int(v) or DEFAULT_SEARCH_LIMIT, MAX_SEARCH_LIMIT)

    def to_query(self) -> SearchQuery:
        return SearchQuery(query=self.query, labeler=self.labeler, page=self.page, limit=self.limit)


def _positive_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
    if not isinstance(value, int | float) or not math.isfinite(value):
        return None
    number = int(value)
    return number if number >= 1 else None


class UnknownToolError(LookupError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


# ─────────────────────────────────────────────────────────────────────────────
# Tool catalog
# ─────────────────────────────────────────────────────────────────────────────

_DRUG_NAME_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "drugName": {"type": "string", "description": "The brand name of the drug"},
        "genericName": {"type": "string", "description": "The generic name of the drug (optional)"},
    },
    "required": ["drugName"],
}

TOOL_CATALOG: tuple[dict[str, Any], ...] = (
    {
        "name": "get_drug_by_name",
        "description": "Get detailed drug information by drug name and optional generic name",
        "inputSchema": _DRUG_NAME_SCHEMA,
    },
    {
        "name": "search_drugs",
        "description": "Search for drugs by name, generic name, or labeler",
        "inputSchema": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Search query to match against drug names, generic names, or labelers",
                },
                "labeler": {"type": "string", "description": "Filter by specific drug manufacturer/labeler"},
                "page": {"type": "number", "description": "Page number for pagination (default: 1)", "default": 1},
                "limit": {
                    "type": "number",
                    "description": "Number of results per page (default: 20)",
                    "default": 20,
                },
            },
        },
    },
    {
        "name": "get_enhanced_sections",
        "description": "Get AI-enhanced content sections for a specific drug",
        "inputSchema": _DRUG_NAME_SCHEMA,
    },
)

TOOL_NAMES = frozenset(t["name"] for t in TOOL_CATALOG)


def initialize_result() -> dict[str, Any]:
    return {
        "protocolVersion": PROTOCOL_VERSION,
        "capabilities": {"tools": {}},
        "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
    }


# ─────────────────────────────────────────────────────────────────────────────
# Envelope builders
# ─────────────────────────────────────────────────────────────────────────────


def success_response(request_id: RequestId, result: Any) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def error_response(
    request_id: RequestId, code: RpcErrorCode, message: str, data: Any = None
) -> dict[str, Any]:
    error: dict[str, Any] = {"code": int(code), "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error}


def text_result(text: str) -> dict[str, Any]:
    return {"content": [{"type": "text", "text": text}]}


def error_result(text: str) -> dict[str, Any]:
    return {"content": [{"type": "text", "text": text}], "isError": True}


def render_json(payload: Any) -> str:
    """Indented JSON text for tool results."""
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode()
