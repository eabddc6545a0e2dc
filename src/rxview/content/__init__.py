"""Content pipeline: assembly, generation, orchestration.

Flow:
    DrugRecord -> build_basic_content -> BasicContent       (fast path)
    DrugRecord -> EnhancementOrchestrator -> EnhancedContent (cache-aside)
"""

from .assembler import build_basic_content, build_sections, create_slug, strip_html
from .gateway import GenerationOptions, ModelGateway
from .orchestrator import EnhancementOrchestrator
from .prompts import fallback_seo, fallback_summary, prepare_section_contents, section_schema
from .provider import ModelProvider, OpenAIProvider
from .service import DrugContentService

__all__ = [
    # Assembly
    "build_sections", "build_basic_content", "create_slug", "strip_html",
    # Generation
    "ModelProvider", "OpenAIProvider", "ModelGateway", "GenerationOptions",
    "section_schema", "prepare_section_contents", "fallback_seo", "fallback_summary",
    # Orchestration
    "EnhancementOrchestrator", "DrugContentService",
]
