import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, List, Optional

import httpx

from app.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

SOURCES = ("local", "s3", "api")

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


class TravelDataFetchError(Exception):
    """The travel records could not be loaded; treat them as unavailable."""

    def __init__(self, message: str, attempts: int):
        super().__init__(message)
        self.attempts = attempts


class TerminalFetchError(TravelDataFetchError):
    pass


class RetriesExhaustedError(TravelDataFetchError):
    pass


class _TransientFetchError(Exception):
    pass


def is_retryable_status(status_code: int) -> bool:
    return status_code >= 500 or status_code == 429


class TravelDataClient:
    def __init__(
        self,
        settings: Settings = default_settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.settings = settings
        self.transport = transport
        self.sleep = sleep

    def _build_request(self, source: str, now: datetime) -> tuple[str, dict]:
        urls = {
            "local": self.settings.TRAVEL_DATA_LOCAL_URL,
            "s3": self.settings.TRAVEL_DATA_S3_URL,
            "api": self.settings.TRAVEL_DATA_API_URL,
        }
        if source not in urls:
            raise ValueError(f"Unknown travel data source {source!r}; expected one of {SOURCES}")

        params = {}
        if source in ("local", "s3"):
            # cache-busting version for static hosts
            params["v"] = str(int(now.timestamp() * 1000))
        return urls[source], params

    async def _fetch_once(self, client: httpx.AsyncClient, url: str, params: dict, attempt: int) -> List[dict]:
        try:
            response = await client.get(url, params=params, headers=NO_CACHE_HEADERS)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            message = f"HTTP {status} {e.response.reason_phrase} from {url}"
            if is_retryable_status(status):
                raise _TransientFetchError(f"Server error: {message}") from e
            raise TerminalFetchError(f"Failed to fetch travel data: {message}", attempts=attempt) from e
        except (httpx.DecodingError, httpx.TooManyRedirects) as e:
            raise TerminalFetchError(f"Failed to fetch travel data from {url}: {e!r}", attempts=attempt) from e
        except httpx.RequestError as e:
            raise _TransientFetchError(f"Network error fetching {url}: {e!r}") from e

        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise TerminalFetchError(f"Invalid data format: response from {url} is not JSON", attempts=attempt) from e

        if not isinstance(data, list):
            raise TerminalFetchError(
                f"Invalid data format: expected array, got {type(data).__name__}",
                attempts=attempt,
            )
        return data

    async def fetch_travel_data(self, source: str = "api", now: Optional[datetime] = None) -> List[dict]:
        """Fetch the raw travel rows, retrying transient failures with exponential backoff.

        Network errors, 5xx and 429 are retried up to FETCH_MAX_ATTEMPTS times in total,
        waiting FETCH_BASE_DELAY_SECONDS * 2**(k-2) before attempt k. Anything else fails
        immediately with TerminalFetchError.
        """
        now = now or datetime.now(timezone.utc)
        url, params = self._build_request(source, now)
        max_attempts = self.settings.FETCH_MAX_ATTEMPTS
        last_error: Optional[_TransientFetchError] = None

        async with httpx.AsyncClient(
            transport=self.transport,
            timeout=self.settings.FETCH_TIMEOUT_SECONDS,
            follow_redirects=True,
        ) as client:
            for attempt in range(1, max_attempts + 1):
                if attempt > 1:
                    delay = self.settings.FETCH_BASE_DELAY_SECONDS * 2 ** (attempt - 2)
                    logger.info(f"Retrying travel data fetch in {delay:.1f}s (attempt {attempt}/{max_attempts})")
                    await self.sleep(delay)

                try:
                    rows = await self._fetch_once(client, url, params, attempt)
                except _TransientFetchError as e:
                    last_error = e
                    logger.warning(f"Attempt {attempt} failed: {e}")
                    continue
                except TerminalFetchError as e:
                    logger.error(f"Travel data fetch failed without retry: {e}")
                    raise

                logger.info(f"Fetched {len(rows)} travel rows from {source} on attempt {attempt}")
                return rows

        message = str(last_error) if last_error else "Failed to load travel data"
        logger.error(f"Giving up on travel data after {max_attempts} attempts: {message}")
        raise RetriesExhaustedError(message, attempts=max_attempts)


travel_data_client = TravelDataClient()
