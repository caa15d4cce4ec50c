"""FastAPI endpoints for the chat backend.

Endpoints:
    - GET /health: Service health status
    - POST /api/chat: Streamed chat completion
    - GET /api/messages: Persisted history, oldest first
"""

from chatline.api.app import create_app

__all__ = ["create_app"]
