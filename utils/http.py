import httpx, logging
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from config.config import Settings

logger = logging.getLogger(__name__)

def build_client(settings: Settings) -> httpx.AsyncClient:
    """Shared client, created once at startup and passed to every adapter."""
    headers = {
        "User-Agent": settings.USER_AGENT
    }
    return httpx.AsyncClient(timeout=settings.SOURCE_TIMEOUT, headers=headers, follow_redirects=True)

def _is_retryable(exc: BaseException) -> bool:
    # client errors (bad key, missing page) won't fix themselves
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status >= 500 or status == 429
    return isinstance(exc, httpx.TransportError)

async def get(client: httpx.AsyncClient, url: str, *, settings: Settings, headers: dict | None = None, timeout: float | None = None, **params) -> httpx.Response:
    attempts = max(1, settings.MAX_RETRIES)

    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=1, min=settings.RETRY_MIN_WAIT, max=settings.RETRY_MAX_WAIT),
        retry=retry_if_exception(_is_retryable),
        reraise=True
    ):
        with attempt:
            try:
                r = await client.get(url, params=params or None, headers=headers, timeout=timeout or settings.SOURCE_TIMEOUT)
                r.raise_for_status()
                return r
            except httpx.HTTPError as e:
                if _is_retryable(e) and attempt.retry_state.attempt_number < attempts:
                    logger.warning(f"Request to {url} failed, retrying: {str(e)}")
                raise
