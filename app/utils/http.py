from typing import Optional
import httpx


async def send_request(
    http_client: Optional[httpx.AsyncClient],
    method: str,
    url: str,
    timeout: float,
    **kwargs,
) -> httpx.Response:
    """Send through the shared client when there is one, else through a short-lived client."""
    if http_client is not None:
        return await http_client.request(method, url, timeout=timeout, **kwargs)
    async with httpx.AsyncClient(timeout=timeout) as client:
        return await client.request(method, url, **kwargs)
