from enum import Enum


class QuoteStatus(str, Enum):
    QUOTED = "quoted"
    NO_DRIVER_AVAILABLE = "no_driver_available"

    def __str__(self):
        return self.value


class FailureKind(str, Enum):
    DIRECTORY_UNAVAILABLE = "directory_unavailable"
    ROUTING_UNAVAILABLE = "routing_unavailable"
    ROUTING_DECODE_FAILED = "routing_decode_failed"
    NO_ROUTE_FOUND = "no_route_found"
    MALFORMED_REQUEST = "malformed_request"
    PRICING_FAILED = "pricing_failed"

    def __str__(self):
        return self.value


class Upstream(str, Enum):
    DIRECTORY = "directory"
    ROUTING = "routing"

    def __str__(self):
        return self.value
