"""LLM-backed HTML generation from Figma file data.

Pipeline: raw file response -> FigmaExtractor -> compact JSON -> prompt ->
LangChain chat model -> HTML text.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

from langchain_core.language_models.chat_models import BaseChatModel

from figma2html import config, settings
from figma2html.extraction import FigmaExtractor, to_compact_json

from .prompts import CONNECTION_TEST_PROMPT, build_html_prompt

logger = logging.getLogger("figma2html.llm")

SUPPORTED_PROVIDERS = ("openai", "gemini")


class HtmlGenerationError(Exception):
    """Raised when the LLM cannot be configured or invoked."""


def create_chat_model(provider: str) -> BaseChatModel:
    """Build the configured LangChain chat model for ``provider``."""
    if provider == "openai":
        if not config.OPENAI_API_KEY:
            raise HtmlGenerationError("OPENAI_API_KEY is not set in environment variables")
        from langchain_openai import ChatOpenAI

        logger.info(f"Using OpenAI model: {config.OPENAI_MODEL}")
        return ChatOpenAI(
            model=config.OPENAI_MODEL,
            temperature=settings.OPENAI_TEMPERATURE,
            max_tokens=settings.OPENAI_MAX_TOKENS,
            api_key=config.OPENAI_API_KEY,
        )

    if provider == "gemini":
        if not config.GEMINI_API_KEY:
            raise HtmlGenerationError("GEMINI_API_KEY is not set in environment variables")
        from langchain_google_genai import ChatGoogleGenerativeAI

        logger.info(f"Using Gemini model: {config.GEMINI_MODEL}")
        return ChatGoogleGenerativeAI(
            model=config.GEMINI_MODEL,
            temperature=settings.GEMINI_TEMPERATURE,
            max_output_tokens=settings.GEMINI_MAX_TOKENS,
            google_api_key=config.GEMINI_API_KEY,
        )

    raise HtmlGenerationError(
        f"Unsupported LLM provider {provider!r}, expected one of {SUPPORTED_PROVIDERS}"
    )


def _message_text(content: Any) -> str:
    """Flatten AIMessage content (str or list of content blocks) to text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "".join(parts)
    return str(content)


class HtmlGenerator:
    """Turn Figma file responses into HTML via an LLM.

    Args:
        provider: "openai" or "gemini"; defaults to LLM_PROVIDER.
        llm: Pre-built chat model; skips provider setup when given.
        extractor: Extractor used to minimize the file before prompting.
    """

    def __init__(
        self,
        provider: Optional[str] = None,
        llm: Optional[BaseChatModel] = None,
        extractor: Optional[FigmaExtractor] = None,
    ):
        self.provider = provider or config.LLM_PROVIDER or "gemini"
        self.llm = llm if llm is not None else create_chat_model(self.provider)
        self.extractor = extractor or FigmaExtractor()

    async def test_connection(self) -> str:
        response = await self.llm.ainvoke(CONNECTION_TEST_PROMPT)
        return _message_text(response.content).strip()

    async def convert(self, figma_file_data: Dict[str, Any]) -> Dict[str, Any]:
        """Generate HTML for a raw Figma file response.

        Returns:
            Dict with ``html``, the ``extracted`` result, and the
            ``original_size`` / ``compact_size`` character counts.
        """
        extracted = self.extractor.extract_essential_data(figma_file_data)
        compact = to_compact_json(extracted)
        original_size = len(json.dumps(figma_file_data, ensure_ascii=False))

        logger.info(
            f"convert: file={extracted['fileName']!r}, provider={self.provider}, "
            f"original={original_size} chars, compact={len(compact)} chars, "
            f"pages={extracted['summary']['totalPages']}"
        )

        try:
            response = await self.llm.ainvoke(build_html_prompt(compact))
        except Exception as e:
            logger.error(f"convert: LLM invocation failed: {e}")
            raise HtmlGenerationError(f"LLM invocation failed: {e}") from e

        html = _message_text(response.content).strip()
        if not html:
            raise HtmlGenerationError("LLM returned an empty response")

        return {
            "html": html,
            "extracted": extracted,
            "original_size": original_size,
            "compact_size": len(compact),
        }
