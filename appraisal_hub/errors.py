"""Exceptions raised by the property data transformation layer.

They never cross the assembler or batch boundaries: both convert them into a
failed ``PropertyDataResponse``.
"""

from __future__ import annotations

from typing import Optional


class PropertyDataError(ValueError):
    """Input or provider data that cannot be shaped into a property response."""

    def __init__(self, message: str, property_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.property_id = property_id


class MissingInputError(PropertyDataError):
    """A required input (property id, attributes, address, market statistics) is absent."""


__all__ = ["PropertyDataError", "MissingInputError"]
