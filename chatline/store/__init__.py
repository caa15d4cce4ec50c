"""Persisted chat history.

Wraps a relational database behind two operations, append and
ordered fetch, so the rest of the application never touches SQL.
"""

from chatline.store.repository import InMemoryMessageStore, MessageStore, SqlMessageStore

__all__ = ["InMemoryMessageStore", "MessageStore", "SqlMessageStore"]
