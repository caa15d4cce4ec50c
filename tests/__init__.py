"""Test package for Chatline.

Structure:
    - unit/: Individual function and class tests
    - integration/: Endpoint workflow tests

Runs entirely in-process: no LLM provider or database server is needed.
"""
