"""In-memory persistence."""

from userauth.infrastructure.memory.user_store import InMemoryUserStore

__all__ = ["InMemoryUserStore"]
