"""Tool protocol adapter: JSON-RPC requests in, JSON-RPC responses out.

Two failure channels:
    - Envelope ``error``: unknown method (-32601) or a malformed request (-32603)
    - Tool result with ``isError: true``: not-found, bad arguments, or any
      exception raised while running a tool

handle_request never raises.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from rxview.foundation.errors import Found, LookupOutcome, NotFound, RpcErrorCode, TransientFailure
from rxview.models import EnhancedContent
from rxview.runtime.observability import get_logger

from .protocol import (
    TOOL_CATALOG,
    DrugNameArgs,
    JsonRpcRequest,
    RequestId,
    SearchArgs,
    ToolCall,
    UnknownToolError,
    error_response,
    error_result,
    initialize_result,
    render_json,
    success_response,
    text_result,
)

if TYPE_CHECKING:
    from rxview.content import DrugContentService

log = get_logger("rxview.mcp")


def _raw_id(raw: object) -> RequestId:
    if isinstance(raw, Mapping):
        value = raw.get("id")
        if isinstance(value, str | int | float) and not isinstance(value, bool):
            return value
    return None


class ToolProtocolAdapter:
    """Routes ``initialize``, ``tools/list`` and ``tools/call`` to the content service.

    Example:
        >>> adapter = ToolProtocolAdapter(service)
        >>> await adapter.handle_request({"jsonrpc": "2.0", "id": 1, "method": "tools/list"})
        {'jsonrpc': '2.0', 'id': 1, 'result': {'tools': [...]}}
    """

    __slots__ = ("_service",)

    def __init__(self, service: DrugContentService) -> None:
        self._service = service

    def list_tools(self) -> list[dict[str, Any]]:
        return list(TOOL_CATALOG)

    async def handle_request(self, raw: object) -> dict[str, Any]:
        try:
            request = JsonRpcRequest.model_validate(raw)
        except ValidationError as e:
            log.warning("malformed request", error=str(e))
            return error_response(_raw_id(raw), RpcErrorCode.INTERNAL_ERROR, "Internal error", str(e))

        log.info("request", method=request.method, id=request.id)
        try:
            match request.method:
                case "initialize":
                    return success_response(request.id, initialize_result())
                case "tools/list":
                    return success_response(request.id, {"tools": self.list_tools()})
                case "tools/call":
                    return success_response(request.id, await self.call_tool(request.params))
                case _:
                    return error_response(
                        request.id, RpcErrorCode.METHOD_NOT_FOUND, f"Method not found: {request.method}"
                    )
        except asyncio.CancelledError:
            raise
        except Exception as e:
            log.exception("request failed", method=request.method)
            return error_response(request.id, RpcErrorCode.INTERNAL_ERROR, "Internal error", str(e))

    async def call_tool(self, params: Mapping[str, Any] | None) -> dict[str, Any]:
        """Run a tool. Every failure becomes an ``isError`` result."""
        name = (params or {}).get("name")
        try:
            call = ToolCall.model_validate(params or {})
            return await self._dispatch(call)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            log.error("tool execution failed", tool=name, error=str(e))
            return error_result(f"Error executing tool: {e}")

    async def _dispatch(self, call: ToolCall) -> dict[str, Any]:
        match call.name:
            case "get_drug_by_name":
                args = DrugNameArgs.model_validate(call.arguments)
                outcome = await self._service.enhanced_by_names(args.drug_name, args.generic_name)
                return _render(outcome, lambda content: content.to_payload())
            case "search_drugs":
                page = await self._service.search(SearchArgs.model_validate(call.arguments).to_query())
                return text_result(render_json(page.to_payload()))
            case "get_enhanced_sections":
                args = DrugNameArgs.model_validate(call.arguments)
                outcome = await self._service.enhanced_by_names(args.drug_name, args.generic_name)
                return _render(outcome, _enhanced_sections_payload)
            case _:
                raise UnknownToolError(call.name)


def _render(outcome: LookupOutcome[EnhancedContent], to_payload) -> dict[str, Any]:
    match outcome:
        case Found(content):
            return text_result(render_json(to_payload(content)))
        case NotFound(query):
            return error_result(f"Drug not found: {query}")
        case TransientFailure(message):
            return error_result(f"Error executing tool: {message}")


def _enhanced_sections_payload(content: EnhancedContent) -> dict[str, Any]:
    return {
        "drugName": content.drug_name,
        "genericName": content.generic_name,
        "enhancedSections": [
            {
                "title": s.title,
                "originalContent": s.content,
                "enhancedContent": s.enhanced_content,
            }
            for s in content.enhanced_sections
        ],
    }
