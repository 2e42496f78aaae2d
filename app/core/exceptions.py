"""Failure taxonomy for quote requests"""
from typing import Any, Optional

from app.core.enums import FailureKind


class QuoteError(Exception):
    """Base class for every failure that stops a quote from being produced."""

    kind: FailureKind

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class DirectoryUnavailable(QuoteError):
    """Driver roster could not be reached, timed out, or returned garbage."""

    kind = FailureKind.DIRECTORY_UNAVAILABLE


class RoutingUnavailable(QuoteError):
    """Routing service could not be reached or timed out."""

    kind = FailureKind.ROUTING_UNAVAILABLE


class RoutingDecodeFailed(QuoteError):
    """Routing service answered with a body that is not a directions response."""

    kind = FailureKind.ROUTING_DECODE_FAILED


class NoRouteFound(QuoteError):
    """Provider answered but had no route or leg for the journey."""

    kind = FailureKind.NO_ROUTE_FOUND


class MalformedRequest(QuoteError):
    """Journey in the incoming request failed to parse."""

    kind = FailureKind.MALFORMED_REQUEST


class PricingFailed(QuoteError):
    """Rate or cost came out non-finite, e.g. a huge rate overflowing once surged."""

    kind = FailureKind.PRICING_FAILED
