"""HTTP transport between the chat page and the chat endpoint."""

from collections.abc import AsyncIterator

import httpx

from chatline.ui.state import ChatViewState


class ChatApiError(Exception):
    """The chat endpoint failed or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None, details: object = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ChatApiError":
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and body.get("error"):
            error = body["error"]
            message = error if isinstance(error, str) else str(error)
            return cls(message, status_code=response.status_code, details=body.get("details"))
        return cls(f"HTTP {response.status_code}", status_code=response.status_code, details=response.text)


class ChatApiClient:
    """Posts conversations to ``/api/chat`` and reads the streamed reply.

    Args:
        base_url: Where the chat endpoint is served.
        timeout: Seconds to wait for each network operation.
        transport: Optional httpx transport (tests pass an ASGI transport).
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    async def stream_chat(self, messages: list[dict[str, str]]) -> AsyncIterator[str]:
        """Yield reply text chunks in arrival order.

        Raises:
            ChatApiError: On an error status or a transport failure.
        """
        try:
            async with (
                httpx.AsyncClient(
                    base_url=self._base_url,
                    timeout=self._timeout,
                    transport=self._transport,
                ) as client,
                client.stream("POST", "/api/chat", json={"messages": messages}) as response,
            ):
                if response.is_error:
                    await response.aread()
                    raise ChatApiError.from_response(response)
                async for text in response.aiter_text():
                    if text:
                        yield text
        except httpx.RequestError as e:
            raise ChatApiError(f"Connection failed: {e}") from e


async def submit_and_stream(state: ChatViewState, client: ChatApiClient) -> None:
    """Run one submit/stream cycle of the chat view.

    Does nothing if the state does not allow a submission.
    """
    payload = state.submit()
    if payload is None:
        return

    try:
        async for chunk in client.stream_chat(payload):
            state.receive_chunk(chunk)
    except ChatApiError as e:
        state.fail(e.message)
    except Exception as e:
        state.fail(str(e) or type(e).__name__)
        raise
    else:
        state.finish()
