"""Shared repository instances for the application.

Used when REFRESH_TOKEN_STORE=memory so every request sees the same tokens.
"""
from app.repositories.memory import InMemoryRefreshTokenRepository

# Singleton instance - shared across all requests
refresh_token_repository = InMemoryRefreshTokenRepository()
