"""Synthetic data generators for the lending domain."""

from ecredit.generators.application import ApplicationGenerator
from ecredit.generators.base import BaseGenerator
from ecredit.generators.profile import ProfileGenerator

__all__ = [
    "ApplicationGenerator",
    "BaseGenerator",
    "ProfileGenerator",
]
