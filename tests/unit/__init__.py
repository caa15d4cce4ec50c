"""Unit tests for individual components in isolation.

Coverage:
    - config: settings defaults, bounds and production checks
    - models: role normalization and request validation
    - store: append/fetch semantics for both store adapters
    - gateway: completion stream events and provider error mapping
    - ui: chat view state machine and HTTP transport

Uses in-process doubles for external services.
"""
