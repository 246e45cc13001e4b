"""Recess - session timeout and rate limiting for a children's learning app client."""

__version__ = "0.1.0"
