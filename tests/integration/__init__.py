"""Integration tests for the chat endpoint working as a system.

Coverage:
    - POST /api/chat streaming, persistence and error responses
    - GET /api/messages history
    - Partial-failure behaviour when the store or the gateway fails

Uses the real FastAPI app with in-process store and gateway doubles.
"""
