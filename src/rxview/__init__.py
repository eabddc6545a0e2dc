"""RxView - drug label content service with AI enhancement.

Turns canonical drug labels into page content: ordered sections for the fast
render path, and enhanced content (SEO title, meta description, summary and
patient-friendly section rewrites) produced through a cache-aside pipeline.
Generation failures degrade to deterministic fallback content, never to errors.

Quick Start:
    >>> from rxview import DrugCatalog, ContentCache, ModelGateway
    >>> from rxview import EnhancementOrchestrator, DrugContentService, get_settings
    >>>
    >>> settings = get_settings()
    >>> cache = ContentCache.from_settings(settings.cache)
    >>> gateway = ModelGateway.from_settings(settings, cache)
    >>> service = DrugContentService(
    ...     DrugCatalog.from_json(settings.catalog.labels_path),
    ...     EnhancementOrchestrator(gateway, cache),
    ... )
    >>> match await service.enhanced_by_names("Tylenol", "acetaminophen"):
    ...     case Found(content): print(content.seo_title)

Tool Protocol (JSON-RPC):
    >>> from rxview import ToolProtocolAdapter
    >>> adapter = ToolProtocolAdapter(service)
    >>> await adapter.handle_request({"jsonrpc": "2.0", "id": 1, "method": "tools/list"})

HTTP Server:
    $ RXVIEW_OPENAI_API_KEY=sk-... python -m rxview
"""

from __future__ import annotations

__version__ = "0.1.0"

# Config
from .foundation.config import RxviewSettings, clear_settings_cache, get_settings

# Errors & outcomes
from .foundation.errors import (
    ErrorCode,
    Found,
    LookupOutcome,
    NotFound,
    ProviderError,
    RateLimitedError,
    RpcErrorCode,
    TransientFailure,
    TransientProviderError,
)

# Models
from .models import (
    SECTION_TABLE,
    BasicContent,
    DrugRecord,
    EnhancedContent,
    SearchPage,
    SearchQuery,
    Section,
    SectionKey,
)

# Cache & catalog
from .io.cache import ContentCache, MemoryCache, Namespace
from .io.catalog import DrugCatalog, DrugLookup

# Retry & logging
from .runtime.observability import configure_logging, get_logger
from .runtime.retry import RetryPolicy, execute_with_retry

# Content pipeline
from .content import (
    DrugContentService,
    EnhancementOrchestrator,
    ModelGateway,
    ModelProvider,
    OpenAIProvider,
    build_basic_content,
    build_sections,
)

# Tool protocol
from .ext.mcp import ToolProtocolAdapter

__all__ = [
    "__version__",
    # Config
    "RxviewSettings", "get_settings", "clear_settings_cache",
    # Errors & outcomes
    "ErrorCode", "RpcErrorCode", "ProviderError", "RateLimitedError", "TransientProviderError",
    "Found", "NotFound", "TransientFailure", "LookupOutcome",
    # Models
    "DrugRecord", "Section", "BasicContent", "EnhancedContent", "SectionKey", "SECTION_TABLE",
    "SearchQuery", "SearchPage",
    # Cache & catalog
    "ContentCache", "MemoryCache", "Namespace", "DrugCatalog", "DrugLookup",
    # Retry & logging
    "RetryPolicy", "execute_with_retry", "configure_logging", "get_logger",
    # Content pipeline
    "build_sections", "build_basic_content", "ModelProvider", "OpenAIProvider", "ModelGateway",
    "EnhancementOrchestrator", "DrugContentService",
    # Tool protocol
    "ToolProtocolAdapter",
]
