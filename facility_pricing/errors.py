"""
Pricing error taxonomy.

Every failure the engine reports is one of three kinds so the HTTP layer can
translate it without inspecting messages:
  • NotFoundError              → facility or pricing plan absent   (404)
  • NotReadyError              → facility cannot be priced yet    (422)
  • InvalidConfigurationError  → pricing plan values out of range (422)
"""

from __future__ import annotations

from typing import Any


class PricingError(Exception):
    """Base class for all pricing engine errors."""


class NotFoundError(PricingError, LookupError):
    """A facility or pricing plan could not be resolved."""

    def __init__(self, kind: str, identifier: str | None = None):
        self.kind = kind
        self.identifier = identifier
        if identifier:
            message = f"{kind} not found: {identifier}"
        else:
            message = f"No {kind} found"
        super().__init__(message)


class NotReadyError(PricingError):
    """The facility exists but has nothing that can be priced."""

    def __init__(self, reason: str, message: str):
        self.reason = reason
        self.message = message
        super().__init__(message)


class InvalidConfigurationError(PricingError, ValueError):
    """A pricing plan holds values outside their declared ranges."""

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        self.errors = errors or []
        super().__init__(message)
