"""Journey quote endpoint"""
import asyncio
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Request
from starlette.responses import Response

from app.core.config import settings
from app.core.enums import QuoteStatus
from app.core.metrics import quotes_total
from app.schemas.quote import Journey, QuoteResponse, QuoteResult
from app.services.directory import DriverDirectoryClient
from app.services.quote import QuoteService
from app.services.routing import MajorRoadClassifier, RouteAnalyzer

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/quotes", tags=["quotes"])

NO_DRIVER_MESSAGE = "No drivers available at this time."
CLIENT_CLOSED_REQUEST = 499

# compiled at import so a bad MAJOR_ROAD_PATTERN stops startup
major_road_classifier = MajorRoadClassifier(settings.MAJOR_ROAD_PATTERN)


def get_quote_service(request: Request) -> QuoteService:
    http_client = getattr(request.app.state, "http_client", None)
    directory = DriverDirectoryClient(
        base_url=settings.DRIVERS_URL,
        api_key=settings.DRIVERS_API_KEY,
        timeout=settings.DIRECTORY_TIMEOUT,
        http_client=http_client,
    )
    analyzer = RouteAnalyzer(
        base_url=settings.DIRECTIONS_URL,
        api_key=settings.DIRECTIONS_API_KEY,
        timeout=settings.ROUTING_TIMEOUT,
        classifier=major_road_classifier,
        http_client=http_client,
        cache_ttl=settings.ROUTE_CACHE_TTL,
    )
    return QuoteService(directory, analyzer)


async def wait_for_disconnect(request: Request) -> None:
    # the body is already read, so the next message is the disconnect
    while True:
        message = await request.receive()
        if message["type"] == "http.disconnect":
            return


async def produce_until_disconnect(request: Request, service: QuoteService, journey: Journey) -> Optional[QuoteResult]:
    """Run the quote, cancelling its outbound calls if the client goes away first.

    Returns None when the client disconnected before the quote was ready.
    """
    quote_task = asyncio.ensure_future(service.produce_quote(journey))
    disconnect_task = asyncio.ensure_future(wait_for_disconnect(request))
    try:
        await asyncio.wait({quote_task, disconnect_task}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        quote_task.cancel()
        raise
    finally:
        if not disconnect_task.done():
            disconnect_task.cancel()

    if quote_task.done() or disconnect_task.cancelled() or disconnect_task.exception() is not None:
        return await quote_task

    quote_task.cancel()
    await asyncio.gather(quote_task, return_exceptions=True)
    return None


@router.post("", response_model=QuoteResponse, response_model_exclude_none=True)
async def create_quote(request: Request, journey: Journey, service: QuoteService = Depends(get_quote_service)):

    result = await produce_until_disconnect(request, service, journey)

    if result is None:
        logger.info(f"Client disconnected, abandoned quote {journey.start} -> {journey.end}")
        quotes_total.labels(outcome="client_disconnected").inc()
        return Response(status_code=CLIENT_CLOSED_REQUEST)

    if result.status == QuoteStatus.NO_DRIVER_AVAILABLE:
        return QuoteResponse(status=result.status, message=NO_DRIVER_MESSAGE)

    return QuoteResponse(
        status=result.status,
        effective_rate_per_km=result.quote.effective_rate_per_km,
        total_cost=result.quote.total_cost,
    )
