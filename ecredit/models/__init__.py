"""Domain models for the lending app."""

from ecredit.models.base import Address

__all__ = ["Address"]
