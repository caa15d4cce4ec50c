"""Completion gateway: streamed chat completions.

Responsibilities:
    - Submitting a conversation to an OpenAI-compatible API
    - Turning provider chunks into ordered text deltas and a completion event
    - Separating upfront rejections from mid-stream failures
"""

from chatline.gateway.client import CompletionGateway, OpenAICompletionGateway
from chatline.gateway.fake import EchoCompletionGateway
from chatline.gateway.stream import Completed, CompletionStream, StreamEvent, TextDelta

__all__ = [
    "Completed",
    "CompletionGateway",
    "CompletionStream",
    "EchoCompletionGateway",
    "OpenAICompletionGateway",
    "StreamEvent",
    "TextDelta",
]
