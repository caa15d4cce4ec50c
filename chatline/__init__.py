"""Chatline - a minimal web chat UI backed by a streaming LLM and a message store.

Combines FastAPI for HTTP streaming, the OpenAI SDK for completions,
SQLAlchemy for persistence, NiceGUI for the chat page, and Pydantic
for configuration and validation.

Components:
    - api: the chat endpoint and application factory
    - gateway: streamed completions from an OpenAI-compatible API
    - store: append-only persisted message history
    - ui: chat view state, HTTP transport and the NiceGUI page
    - models: request/response schemas
"""

__version__ = "0.1.0"
