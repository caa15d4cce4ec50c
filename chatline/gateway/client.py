"""Completion gateway backed by the OpenAI async SDK.

Works with OpenAI and any OpenAI-compatible API via ``base_url``.
Rejections (bad key, quota, malformed input, unreachable host) surface
from ``start`` as ``UpstreamError`` before any text is produced. Errors
after that point come out of the stream as ``CompletionStreamError``.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Sequence
from typing import Any

import httpx

from openai import (
    APIConnectionError,
    APIStatusError,
    AsyncOpenAI,
    AsyncStream,
    AuthenticationError,
)
from openai.types.chat import ChatCompletionChunk

from chatline.config import Settings
from chatline.errors import UpstreamError
from chatline.gateway.stream import CompletionStream
from chatline.models.schemas import ChatMessage

logger = logging.getLogger(__name__)

API_KEY_HINT = "Check that the LLM API key is configured correctly."


class CompletionGateway(ABC):
    """Submit a conversation, receive an incremental completion."""

    @abstractmethod
    async def start(self, messages: Sequence[ChatMessage]) -> CompletionStream:
        """Request a streamed completion for ``messages``.

        Raises:
            UpstreamError: If the provider rejects or cannot receive the request.
        """

    async def close(self) -> None:
        """Release any held resources."""


class OpenAICompletionGateway(CompletionGateway):
    """Streams chat completions from an OpenAI-compatible API."""

    def __init__(
        self,
        client: AsyncOpenAI,
        model_name: str,
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> None:
        self._client = client
        self._model_name = model_name
        self._temperature = temperature
        self._max_tokens = max_tokens

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
    ) -> "OpenAICompletionGateway":
        # Failed requests are surfaced to the caller, never resent
        client = AsyncOpenAI(
            api_key=settings.openai_api_key,
            base_url=settings.base_url,
            max_retries=0,
            http_client=http_client,
        )
        return cls(
            client,
            model_name=settings.model_name,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
        )

    def _request_options(self) -> dict[str, Any]:
        options: dict[str, Any] = {}
        if self._temperature is not None:
            options["temperature"] = self._temperature
        if self._max_tokens is not None:
            options["max_tokens"] = self._max_tokens
        return options

    async def start(self, messages: Sequence[ChatMessage]) -> CompletionStream:
        try:
            response = await self._client.chat.completions.create(
                model=self._model_name,
                messages=[message.model_dump() for message in messages],
                stream=True,
                **self._request_options(),
            )
        except AuthenticationError as e:
            logger.error(f"Completion request rejected: {e}")
            raise UpstreamError(
                f"LLM API authentication failed. {API_KEY_HINT}",
                details=e.body if e.body is not None else e.message,
                status_code=e.status_code,
            ) from e
        except APIStatusError as e:
            logger.error(f"Completion request rejected with status {e.status_code}: {e}")
            raise UpstreamError(
                "LLM API rejected the request",
                details=e.body if e.body is not None else e.message,
                status_code=e.status_code,
            ) from e
        except APIConnectionError as e:
            logger.error(f"Completion service unreachable: {e}")
            raise UpstreamError(
                "Could not reach the LLM API",
                details=str(e),
                status_code=500,
            ) from e

        return CompletionStream(self._pieces(response), close=response.close)

    @staticmethod
    async def _pieces(response: AsyncStream[ChatCompletionChunk]) -> AsyncIterator[str]:
        async for chunk in response:
            if not chunk.choices:
                continue
            content = chunk.choices[0].delta.content
            if content:
                yield content

    async def close(self) -> None:
        await self._client.close()
