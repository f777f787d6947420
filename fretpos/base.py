"""Base utilities and exceptions for fretpos.

This module provides the small set of exceptions shared by the theory,
fretboard and progression modules.
"""

from __future__ import annotations

from typing import Any


class MatchException(Exception):
    """Exception raised when an exhaustive match over an enum falls through."""

    def __init__(self, value: Any) -> None:
        """Initialize a MatchException with the unmatched value.

        Args:
            value: The value that failed to match any case.
        """
        super().__init__(f"Failed to match value: {value}")
