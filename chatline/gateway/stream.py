"""Incremental completion delivery.

A ``CompletionStream`` turns the raw text pieces produced by a provider
into ``TextDelta`` events followed by exactly one ``Completed`` event
carrying the full text. It can be iterated once.
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass

from chatline.errors import CompletionStreamError


@dataclass(frozen=True)
class TextDelta:
    """One increment of completion text, in arrival order."""

    text: str


@dataclass(frozen=True)
class Completed:
    """Terminal event carrying the concatenation of every delta."""

    text: str


StreamEvent = TextDelta | Completed


class CompletionStream:
    """Lazy, finite, single-use sequence of completion events."""

    def __init__(
        self,
        pieces: AsyncIterator[str],
        close: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self._pieces = pieces
        self._close = close
        self._consumed = False
        self._closed = False
        self.text: str | None = None

    def __aiter__(self) -> AsyncIterator[StreamEvent]:
        if self._consumed:
            raise RuntimeError("A completion stream can only be iterated once")
        self._consumed = True
        return self._events()

    async def _events(self) -> AsyncIterator[StreamEvent]:
        parts: list[str] = []
        try:
            async for piece in self._pieces:
                if not piece:
                    continue
                parts.append(piece)
                yield TextDelta(piece)
        except CompletionStreamError:
            raise
        except Exception as e:
            raise CompletionStreamError("Completion stream failed", details=str(e)) from e
        finally:
            await self.aclose()

        self.text = "".join(parts)
        yield Completed(self.text)

    async def aclose(self) -> None:
        """Release the upstream response. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        if self._close is not None:
            await self._close()
