"""Local persistence for settings such as the API key."""

from gemini_consistency.store.credentials import CredentialStore

__all__ = ["CredentialStore"]
