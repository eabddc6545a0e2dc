"""Text-generation provider adapters.

A provider takes a prompt (optionally with a JSON schema) and returns the raw
response text. Failures are raised as ProviderError subclasses so the retry
policy can tell rate limits from other transient failures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

import openai

from rxview.foundation.errors import ErrorCode, ProviderError, RateLimitedError, TransientProviderError

if TYPE_CHECKING:
    from rxview.foundation.config import OpenAISettings


@runtime_checkable
class ModelProvider(Protocol):
    """Protocol for text-generation backends."""

    async def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        json_schema: dict[str, Any] | None = None,
        schema_name: str = "response",
    ) -> str:
        """Return the response text, or raise ProviderError."""
        ...


class OpenAIProvider:
    """OpenAI chat-completions provider.

    Schema-constrained calls use ``response_format`` with a strict JSON schema,
    so a successful response always parses into exactly the schema's keys.

    Example:
        >>> provider = OpenAIProvider.from_settings(get_settings().openai)
        >>> await provider.complete("Say hello", temperature=0.2)
    """

    __slots__ = ("_client", "_model")

    def __init__(self, client: openai.AsyncOpenAI, model: str = "gpt-4.1-nano") -> None:
        self._client = client
        self._model = model

    @classmethod
    def from_settings(cls, settings: OpenAISettings) -> OpenAIProvider:
        if settings.api_key is None:
            raise ValueError("OpenAIProvider requires RXVIEW_OPENAI_API_KEY")
        client = openai.AsyncOpenAI(
            api_key=settings.api_key.get_secret_value(),
            base_url=settings.base_url,
            timeout=settings.timeout,
            max_retries=0,  # retries are owned by RetryPolicy
        )
        return cls(client, settings.model)

    async def complete(
        self,
        prompt: str,
        *,
        system: str | None = None,
        temperature: float = 0.7,
        max_tokens: int | None = None,
        json_schema: dict[str, Any] | None = None,
        schema_name: str = "response",
    ) -> str:
        messages: list[dict[str, str]] = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        kwargs: dict[str, Any] = {"model": self._model, "messages": messages, "temperature": temperature}
        if max_tokens is not None:
            kwargs["max_tokens"] = max_tokens
        if json_schema is not None:
            kwargs["response_format"] = {
                "type": "json_schema",
                "json_schema": {"name": schema_name, "schema": json_schema, "strict": True},
            }

        try:
            completion = await self._client.chat.completions.create(**kwargs)
        except openai.RateLimitError as e:
            raise RateLimitedError(str(e)) from e
        except openai.APITimeoutError as e:
            raise TransientProviderError(str(e), ErrorCode.TIMEOUT) from e
        except openai.APIConnectionError as e:
            raise TransientProviderError(str(e), ErrorCode.NETWORK_ERROR) from e
        except openai.APIStatusError as e:
            raise ProviderError(f"HTTP {e.status_code}: {e.message}", ErrorCode.EXTERNAL_SERVICE_ERROR) from e

        if not completion.choices:
            return ""
        return (completion.choices[0].message.content or "").strip()
