"""Tool protocol (JSON-RPC) adapter over the drug content service.

Example:
    >>> from rxview.ext.mcp import ToolProtocolAdapter
    >>> adapter = ToolProtocolAdapter(service)
    >>> response = await adapter.handle_request(payload)
"""

from .adapter import ToolProtocolAdapter
from .protocol import (
    PROTOCOL_VERSION,
    SERVER_NAME,
    SERVER_VERSION,
    TOOL_CATALOG,
    TOOL_NAMES,
    DrugNameArgs,
    JsonRpcRequest,
    SearchArgs,
    ToolCall,
    UnknownToolError,
    error_response,
    error_result,
    text_result,
)

__all__ = [
    "ToolProtocolAdapter",
    # Protocol
    "JsonRpcRequest", "ToolCall", "DrugNameArgs", "SearchArgs", "UnknownToolError",
    "TOOL_CATALOG", "TOOL_NAMES", "PROTOCOL_VERSION", "SERVER_NAME", "SERVER_VERSION",
    # Envelope builders
    "error_response", "error_result", "text_result",
]
