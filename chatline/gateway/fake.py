"""In-process completion gateway for development and tests.

Used when no LLM API key is configured outside production. Replies
with an echo of the last message, streamed word by word.
"""

import asyncio
import re
from collections.abc import AsyncIterator, Sequence

from chatline.gateway.client import CompletionGateway
from chatline.gateway.stream import CompletionStream
from chatline.models.schemas import ChatMessage


class EchoCompletionGateway(CompletionGateway):
    """Streams a canned reply without contacting any service.

    Args:
        reply: Fixed reply text. Defaults to echoing the last message.
        delay: Seconds to wait between pieces, to make streaming visible.
    """

    def __init__(self, reply: str | None = None, delay: float = 0.0) -> None:
        self._reply = reply
        self._delay = delay

    def reply_for(self, messages: Sequence[ChatMessage]) -> str:
        if self._reply is not None:
            return self._reply
        last = messages[-1].content if messages else ""
        return f"Echo: {last}" if last else "Echo: (empty message)"

    async def start(self, messages: Sequence[ChatMessage]) -> CompletionStream:
        return CompletionStream(self._pieces(self.reply_for(messages)))

    async def _pieces(self, reply: str) -> AsyncIterator[str]:
        # Keep the whitespace attached so the pieces join back exactly
        for piece in re.findall(r"\S+\s*|\s+", reply):
            if self._delay:
                await asyncio.sleep(self._delay)
            yield piece
