"""Chat endpoint: persist, stream a completion, persist again.

``POST /api/chat`` receives the full conversation, stores the trailing
user message, relays the completion to the caller as plain text while
it is generated, and stores the finished reply once the body has been
sent. Store failures are logged and never interrupt the conversation.
"""

import json
import logging
from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from pydantic import ValidationError
from starlette.background import BackgroundTask

from chatline.api.deps import get_gateway, get_store
from chatline.errors import (
    BadRequestError,
    ChatlineError,
    CompletionStreamError,
    ServerError,
    StoreError,
)
from chatline.gateway import Completed, CompletionGateway, CompletionStream, TextDelta
from chatline.models.schemas import ChatRequest, ErrorResponse, Role, StoredMessage
from chatline.store import MessageStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


class ChatRelay:
    """Forwards completion deltas to the caller and keeps the final text.

    Iterating the relay yields each delta as soon as the gateway
    produces it. ``persist`` runs after the response body is sent and
    stores the assembled reply if the completion finished.
    """

    def __init__(self, stream: CompletionStream, store: MessageStore) -> None:
        self._stream = stream
        self._store = store
        self.completion: str | None = None

    async def __aiter__(self) -> AsyncIterator[str]:
        try:
            async for event in self._stream:
                if isinstance(event, TextDelta):
                    yield event.text
                elif isinstance(event, Completed):
                    self.completion = event.text
        except CompletionStreamError as e:
            logger.error(f"Completion stream failed mid-response: {e.details or e}")
            raise
        finally:
            await self._stream.aclose()

    async def persist(self) -> None:
        if self.completion is None:
            logger.warning("Completion did not finish; assistant message not saved")
            return
        try:
            await self._store.append(Role.ASSISTANT, self.completion)
        except StoreError as e:
            logger.error(f"Failed to save assistant message: {e} ({e.details})")


async def _parse_chat_request(request: Request) -> ChatRequest:
    """Read and validate the request body.

    Raises:
        BadRequestError: If the body is not JSON or has no valid messages.
    """
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise BadRequestError("Request body must be valid JSON", details=str(e)) from e

    if not isinstance(body, dict) or not body.get("messages"):
        raise BadRequestError("Messages are required in the request body")

    try:
        return ChatRequest.model_validate(body)
    except ValidationError as e:
        raise BadRequestError(
            "Invalid messages in the request body",
            details=[{"loc": list(err["loc"]), "msg": err["msg"]} for err in e.errors()],
        ) from e


async def _save_user_message(store: MessageStore, content: str) -> None:
    try:
        await store.append(Role.USER, content)
    except StoreError as e:
        logger.error(f"Failed to save user message: {e} ({e.details})")


@router.post(
    "/chat",
    response_class=StreamingResponse,
    responses={
        200: {"content": {"text/plain": {}}, "description": "Streamed completion text"},
        400: {"model": ErrorResponse, "description": "Malformed request body"},
        500: {"model": ErrorResponse, "description": "Completion or server failure"},
    },
)
async def chat(
    request: Request,
    store: Annotated[MessageStore, Depends(get_store)],
    gateway: Annotated[CompletionGateway, Depends(get_gateway)],
) -> StreamingResponse:
    """Stream a completion for the submitted conversation.

    Raises:
        400: Missing, empty or malformed ``messages``.
        4xx/5xx: The completion service rejected the request (its status).
        500: Unexpected server error, with ``details``.
    """
    chat_request = await _parse_chat_request(request)

    try:
        last_message = chat_request.last_message
        if last_message.role == Role.USER:
            await _save_user_message(store, last_message.content)

        stream = await gateway.start(chat_request.messages)
    except ChatlineError:
        raise
    except Exception as e:
        logger.exception("Unexpected error handling chat request")
        raise ServerError("An unexpected error occurred.", details=str(e)) from e

    relay = ChatRelay(stream, store)
    return StreamingResponse(
        relay,
        media_type="text/plain; charset=utf-8",
        background=BackgroundTask(relay.persist),
    )


@router.get("/messages", response_model=list[StoredMessage])
async def list_messages(
    store: Annotated[MessageStore, Depends(get_store)],
) -> list[StoredMessage]:
    """Return the persisted history, oldest first (empty if unavailable)."""
    return await store.fetch_ordered()
