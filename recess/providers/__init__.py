"""Collaborator protocols and backend adapters."""

from recess.providers.base import AuthProvider, Notifier

__all__ = ["AuthProvider", "Notifier"]
