"""cclib models package."""

from .token import Token

__all__ = ["Token"]
