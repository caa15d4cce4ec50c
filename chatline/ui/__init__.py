"""NiceGUI interface - thin visualization layer for the chat thread.

Responsibilities:
    - Initial history load from the message store
    - Chat message display with streaming support
    - Input binding with submission disabled while a reply is in flight
    - Waiting indicator and inline error display

Contains minimal business logic. The view state machine lives in
``state`` and the HTTP transport in ``client``.
"""
