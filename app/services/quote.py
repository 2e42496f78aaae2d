"""Quote orchestration: driver lookup, route analysis, surge pricing."""
import logging
import math
from typing import Optional

from app.core.enums import QuoteStatus
from app.core.exceptions import PricingFailed, QuoteError
from app.core.metrics import quotes_total
from app.schemas.driver import DriverCandidate
from app.schemas.quote import Journey, Quote, QuoteResult
from app.schemas.route import RouteSummary
from app.services.directory import DriverDirectoryClient
from app.services.routing import RouteAnalyzer
from app.services.surge import Clock, build_surge_context, compute_multiplier, current_hour, surge_breakdown

logger = logging.getLogger(__name__)

METERS_PER_KM = 1000.0


def price_quote(driver: DriverCandidate, summary: RouteSummary, multiplier: float) -> Quote:
    effective_rate = multiplier * driver.rate
    total_cost = (summary.total_distance_meters / METERS_PER_KM) * effective_rate
    if not (math.isfinite(effective_rate) and math.isfinite(total_cost)):
        raise PricingFailed(
            "Quote is not a finite number",
            {"driver": driver.name, "rate": driver.rate, "multiplier": multiplier},
        )
    return Quote(
        effective_rate_per_km=effective_rate,
        total_cost=total_cost,
        driver_name=driver.name,
        base_rate=driver.rate,
        multiplier=multiplier,
        distance_meters=summary.total_distance_meters,
    )


class QuoteService:
    """Produces one quote per journey. Holds no per-request state, so one instance serves concurrent requests."""

    def __init__(
        self,
        directory: DriverDirectoryClient,
        analyzer: RouteAnalyzer,
        clock: Optional[Clock] = None,
    ):
        self.directory = directory
        self.analyzer = analyzer
        self.clock = clock

    async def produce_quote(self, journey: Journey) -> QuoteResult:
        try:
            selection = await self.directory.find_best_driver()
            if selection.driver is None:
                logger.info("Tried finding best driver, but none available.")
                quotes_total.labels(outcome=QuoteStatus.NO_DRIVER_AVAILABLE.value).inc()
                return QuoteResult(status=QuoteStatus.NO_DRIVER_AVAILABLE)

            summary = await self.analyzer.analyze_route(journey)

            ctx = build_surge_context(summary, selection.available_count, current_hour(self.clock))
            multiplier = compute_multiplier(ctx)
            quote = price_quote(selection.driver, summary, multiplier)
        except QuoteError as e:
            quotes_total.labels(outcome=e.kind.value).inc()
            raise

        logger.info(
            f"Calculated journey. Driver: {quote.driver_name}, Distance: {quote.distance_meters:g}m, "
            f"Rate: {quote.base_rate:g}/km, Multiplier: {quote.multiplier:g}, "
            f"Final Rate: {quote.effective_rate_per_km:.2f}/km, Cost: {quote.total_cost:.2f}",
            extra={"surge_rules": surge_breakdown(ctx), "hour_of_day": ctx.hour_of_day},
        )
        quotes_total.labels(outcome=QuoteStatus.QUOTED.value).inc()
        return QuoteResult(status=QuoteStatus.QUOTED, quote=quote)
