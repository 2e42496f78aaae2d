"""Route analysis against the directions service.

The provider returns routes -> legs -> steps. Only one leg is priced, picked by
``select_primary_leg``; each of its steps is turned into a ``RouteSegment`` by a
classifier that decides from the instruction text whether the step runs on a
major arterial road.
"""
import logging
import re
from typing import Optional

import httpx
from pydantic import ValidationError

from app.core.enums import Upstream
from app.core.exceptions import NoRouteFound, RoutingDecodeFailed, RoutingUnavailable
from app.core.metrics import track_upstream
from app.schemas.quote import Journey
from app.schemas.route import (
    DirectionsLeg,
    DirectionsResponse,
    DirectionsStep,
    RouteSegment,
    RouteSummary,
)
from app.utils.http import send_request
from app.utils.route_cache import get_cached_route, set_cached_route

logger = logging.getLogger(__name__)

DEFAULT_MAJOR_ROAD_PATTERN = r"A\d+"


class MajorRoadClassifier:
    """Flags a step as major when its instruction contains a road code like ``A40``."""

    def __init__(self, pattern: str = DEFAULT_MAJOR_ROAD_PATTERN):
        self.pattern = re.compile(pattern)

    def is_major_road(self, instructions: str) -> bool:
        return self.pattern.search(instructions) is not None

    def classify(self, step: DirectionsStep) -> RouteSegment:
        return RouteSegment(
            distance_meters=step.distance.value,
            is_major_road=self.is_major_road(step.html_instructions),
        )


def select_primary_leg(directions: DirectionsResponse, route_index: int = 0, leg_index: int = 0) -> DirectionsLeg:
    try:
        return directions.routes[route_index].legs[leg_index]
    except IndexError:
        raise NoRouteFound(
            "No route found",
            {"routes": len(directions.routes), "status": directions.status},
        ) from None


def summarize_leg(leg: DirectionsLeg, classifier: MajorRoadClassifier) -> RouteSummary:
    if not leg.steps:
        raise NoRouteFound("Route leg has no steps")
    segments = [classifier.classify(step) for step in leg.steps]
    major = sum(s.distance_meters for s in segments if s.is_major_road)
    # the leg total is the provider's own rounding of its steps
    return RouteSummary(
        total_distance_meters=leg.distance.value,
        major_road_distance_meters=major,
    )


def decode_directions(payload) -> DirectionsResponse:
    try:
        return DirectionsResponse.model_validate(payload)
    except ValidationError as e:
        raise RoutingDecodeFailed(
            "Directions response has an unexpected shape",
            {"errors": e.error_count()},
        ) from e


class RouteAnalyzer:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 10.0,
        classifier: Optional[MajorRoadClassifier] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        cache_ttl: int = 0,
    ):
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = timeout
        self.classifier = classifier or MajorRoadClassifier()
        self.http_client = http_client
        self.cache_ttl = cache_ttl

    @track_upstream(Upstream.ROUTING.value)
    async def fetch_directions(self, journey: Journey) -> DirectionsResponse:
        try:
            response = await send_request(
                self.http_client,
                "GET",
                self.base_url,
                self.timeout,
                headers={"x-api-key": self.api_key},
                json={"Start": journey.start, "End": journey.end},
            )
        except httpx.TimeoutException as e:
            raise RoutingUnavailable(f"Routing request timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise RoutingUnavailable(f"Routing request failed: {e}") from e

        if not response.is_success:
            raise RoutingUnavailable(
                f"Routing service returned status {response.status_code}",
                {"status_code": response.status_code},
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise RoutingDecodeFailed("Directions response is not valid JSON") from e

        return decode_directions(payload)

    async def analyze_route(self, journey: Journey) -> RouteSummary:
        if self.cache_ttl > 0:
            cached = await get_cached_route(journey)
            if cached is not None:
                return cached

        directions = await self.fetch_directions(journey)
        summary = summarize_leg(select_primary_leg(directions), self.classifier)
        logger.debug(
            f"Route {journey.start} -> {journey.end}: {summary.total_distance_meters}m, "
            f"{summary.major_road_distance_meters}m on major roads"
        )

        if self.cache_ttl > 0:
            await set_cached_route(journey, summary, self.cache_ttl)
        return summary
