"""Client for the driver roster service"""
import logging
from typing import Mapping, Optional

import httpx
from pydantic import TypeAdapter, ValidationError

from app.core.enums import Upstream
from app.core.exceptions import DirectoryUnavailable
from app.core.metrics import track_upstream
from app.schemas.driver import DriverCandidate, DriverSelection
from app.utils.http import send_request

logger = logging.getLogger(__name__)

_roster_adapter = TypeAdapter(dict[str, DriverCandidate])


def parse_roster(payload) -> dict[str, DriverCandidate]:
    # an empty roster may be serialised as null
    if payload is None:
        return {}
    try:
        return _roster_adapter.validate_python(payload)
    except ValidationError as e:
        raise DirectoryUnavailable(
            "Directory response is not a roster",
            {"errors": e.error_count()},
        ) from e


def select_best_driver(roster: Mapping[str, DriverCandidate]) -> DriverSelection:
    """Pick the lowest rate; equal rates go to the lexicographically smallest name."""
    if not roster:
        return DriverSelection(driver=None, available_count=0)
    best = min(roster.values(), key=lambda d: (d.rate, d.name))
    return DriverSelection(driver=best, available_count=len(roster))


class DriverDirectoryClient:
    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 5.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = timeout
        self.http_client = http_client

    @track_upstream(Upstream.DIRECTORY.value)
    async def fetch_roster(self) -> dict[str, DriverCandidate]:
        try:
            response = await send_request(
                self.http_client,
                "GET",
                self.base_url,
                self.timeout,
                headers={"x-api-key": self.api_key},
            )
        except httpx.TimeoutException as e:
            raise DirectoryUnavailable(f"Directory request timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise DirectoryUnavailable(f"Directory request failed: {e}") from e

        if not response.is_success:
            raise DirectoryUnavailable(
                f"Directory returned status {response.status_code}",
                {"status_code": response.status_code},
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise DirectoryUnavailable("Directory response is not valid JSON") from e

        return parse_roster(payload)

    async def find_best_driver(self) -> DriverSelection:
        roster = await self.fetch_roster()
        selection = select_best_driver(roster)
        if selection.driver is None:
            logger.info("Roster is empty, no driver available")
        else:
            logger.debug(
                f"Best driver {selection.driver.name} at {selection.driver.rate}/km "
                f"out of {selection.available_count}"
            )
        return selection
