#!/usr/bin/env python3
"""
validators.py
--------------------
Data validation and normalization utilities for gallery store operations.

Provides argument checks and the tag-token parser shared by the metadata
and tag managers.
"""
from __future__ import annotations

from typing import Any, List, Optional

from .exceptions import ValidationError


class DataValidator:
    """Centralized data validation for database operations."""

    @staticmethod
    def require(value: Any, name: str) -> Any:
        """
        Reject None arguments.

        Args:
            value: Argument to check
            name: Argument name used in the error message

        Returns:
            The value unchanged

        Raises:
            ValidationError: If value is None
        """
        if value is None:
            raise ValidationError(f"{name} cannot be None")
        return value

    @staticmethod
    def normalize_string(value: Any) -> Optional[str]:
        """
        Normalize string value.

        Args:
            value: Value to normalize

        Returns:
            Stripped string, or None when empty
        """
        if value is None:
            return None
        normalized = str(value).strip()
        return normalized or None

    @staticmethod
    def parse_tags(value: Optional[str]) -> List[str]:
        """
        Split a Tags/People metadata value into tag tokens.

        Tokens are separated by commas (with or without a following space),
        trimmed, and empty tokens are discarded. Exact repeats are dropped,
        keeping the first occurrence, since a tag can be linked to one
        metadata item only once. Case is preserved.

        Args:
            value: Raw comma-separated value, e.g. "Vacation, New York, 2013"

        Returns:
            Ordered list of unique tokens

        Examples:
            >>> DataValidator.parse_tags("Vacation, New York,2013, ")
            ['Vacation', 'New York', '2013']
        """
        if not value:
            return []

        tokens: List[str] = []
        for raw in value.split(","):
            token = raw.strip()
            if token and token not in tokens:
                tokens.append(token)
        return tokens
