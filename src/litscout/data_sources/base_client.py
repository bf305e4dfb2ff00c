"""
Base client for all external bibliographic database clients.

Provides: rate limiting, optional retry with exponential backoff, optional
response caching, structured logging, and the never-raising ``search``
contract every source adapter implements.
"""

import asyncio
import json
import logging
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import aiohttp
from pydantic import BaseModel

from litscout.config import Settings, get_settings
from litscout.constants import (
    CACHE_TTL,
    DEFAULT_CACHE_DIR,
    DEFAULT_MAX_RESULTS,
    DEFAULT_TIMEOUT,
    USER_AGENT,
)
from litscout.models.model_paper import Paper
from litscout.models.model_search import SourceResult
from litscout.utils.cache import ResponseCache

logger = logging.getLogger("litscout.data_sources")


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


class RetryConfig(BaseModel):
    """Retry behaviour for failed requests.

    Defaults to a single attempt: one failure per source per request is final.
    """

    max_retries: int = 0
    base_delay: float = 1.0  # seconds
    max_delay: float = 30.0  # seconds
    backoff_factor: float = 2.0
    retryable_status_codes: set[int] = {429, 500, 502, 503, 504}


class RateLimitConfig(BaseModel):
    """Token-bucket rate limiter settings."""

    requests_per_second: float = 5.0
    burst: int = 10


class CacheConfig(BaseModel):
    """Disk cache settings."""

    enabled: bool = False
    directory: Path = DEFAULT_CACHE_DIR
    ttl_seconds: int = CACHE_TTL


class ClientConfig(BaseModel):
    """Top-level config aggregating retry, rate limit, and cache."""

    retry: RetryConfig = RetryConfig()
    rate_limit: RateLimitConfig = RateLimitConfig()
    cache: CacheConfig = CacheConfig()
    timeout_seconds: float = DEFAULT_TIMEOUT

    @classmethod
    def from_settings(cls, settings: Settings) -> "ClientConfig":
        return cls(
            retry=RetryConfig(max_retries=settings.http_max_retries),
            rate_limit=RateLimitConfig(
                requests_per_second=settings.requests_per_second
            ),
            cache=CacheConfig(
                enabled=settings.cache_enabled,
                directory=settings.cache_dir,
                ttl_seconds=settings.cache_ttl_seconds,
            ),
            timeout_seconds=settings.http_timeout_seconds,
        )


# ---------------------------------------------------------------------------
# Rate limiter (async token bucket)
# ---------------------------------------------------------------------------


class TokenBucketRateLimiter:
    """
    Async token-bucket rate limiter.

    Allows `burst` requests immediately, then refills at
    `requests_per_second`.  Callers await `acquire()` before
    making a request; it sleeps only when the bucket is empty.
    """

    def __init__(self, config: RateLimitConfig):
        self.rate = config.requests_per_second
        self.max_tokens = config.burst
        self.tokens = float(config.burst)
        self.last_refill = time.monotonic()
        self._lock = asyncio.Lock()

    async def acquire(self) -> None:
        async with self._lock:
            now = time.monotonic()
            elapsed = now - self.last_refill
            self.tokens = min(self.max_tokens, self.tokens + elapsed * self.rate)
            self.last_refill = now

            if self.tokens < 1.0:
                wait = (1.0 - self.tokens) / self.rate
                logger.debug("Rate limiter: sleeping %.2fs", wait)
                await asyncio.sleep(wait)
                self.tokens = 0.0
                self.last_refill = time.monotonic()
            else:
                self.tokens -= 1.0


# ---------------------------------------------------------------------------
# Request context (for structured logging)
# ---------------------------------------------------------------------------


class RequestContext(BaseModel):
    """Metadata attached to every outgoing request for logging."""

    source: str  # e.g. "openalex", "pubmed"
    method: str  # e.g. "esearch", "works"
    params: dict[str, Any] = {}


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class DataSourceError(Exception):
    """Base exception for data source failures."""

    def __init__(self, source: str, message: str, status_code: int | None = None):
        self.source = source
        self.status_code = status_code
        super().__init__(f"[{source}] {message}")


class RateLimitError(DataSourceError):
    """Raised when rate limit is exceeded and retries are exhausted."""

    pass


# ---------------------------------------------------------------------------
# Base client
# ---------------------------------------------------------------------------


class BaseClient(ABC):
    """
    Abstract base for every bibliographic database client.

    Subclasses implement `_source_name` and their own typed methods that
    call `_rest_get()`, `_rest_get_text()` or `_rest_post()`.
    """

    def __init__(self, config: ClientConfig | None = None):
        self.config = config or ClientConfig()
        self.rate_limiter = TokenBucketRateLimiter(self.config.rate_limit)
        self._session: aiohttp.ClientSession | None = None
        self._cache = (
            ResponseCache(self.config.cache.directory, self.config.cache.ttl_seconds)
            if self.config.cache.enabled
            else None
        )

    @property
    @abstractmethod
    def _source_name(self) -> str:
        """Identifier for this data source, e.g. 'openalex'."""
        ...

    @property
    def source_name(self) -> str:
        return self._source_name

    # -- Session management --------------------------------------------------

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout_seconds)
            self._session = aiohttp.ClientSession(
                timeout=timeout, headers={"User-Agent": USER_AGENT}
            )
        return self._session

    async def close(self) -> None:
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.close()

    # -- Core request with retry + cache + rate limiting ---------------------

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        expect_json: bool = True,
        cache_namespace: str | None = None,
        context: RequestContext | None = None,
    ) -> Any:
        """
        Make an HTTP request with caching, rate limiting, and retry.

        Parameters
        ----------
        method : str
            HTTP method, "GET" or "POST".
        url : str
            Full URL.
        params : dict, optional
            Query string parameters.
        json_body : dict, optional
            JSON body (POST only).
        headers : dict, optional
            Additional HTTP headers.
        expect_json : bool
            Decode the body as JSON; otherwise return the raw text.
        cache_namespace : str, optional
            Cache key namespace.  If None or caching is disabled, the
            cache is skipped.
        context : RequestContext, optional
            Logging context.

        Raises
        ------
        DataSourceError
            On a non-retryable HTTP error, an undecodable body, or once
            every attempt has failed.
        """
        ctx = context or RequestContext(source=self._source_name, method="unknown")
        cache_request = {"url": url, "params": params or {}, "body": json_body or {}}
        use_cache = self._cache is not None and cache_namespace is not None

        # --- Check cache first ---
        if use_cache:
            cached = self._cache.get(cache_namespace, cache_request)
            if cached is not None:
                return cached

        retry = self.config.retry
        last_error: DataSourceError | None = None
        start = time.monotonic()

        for attempt in range(retry.max_retries + 1):
            retry_after: float | None = None
            try:
                await self.rate_limiter.acquire()
                session = await self._get_session()

                logger.info(
                    "Request [%s.%s] attempt=%d url=%s",
                    ctx.source,
                    ctx.method,
                    attempt + 1,
                    url,
                )

                if method.upper() == "GET":
                    resp = await session.get(url, params=params, headers=headers)
                else:
                    resp = await session.post(
                        url, json=json_body, params=params, headers=headers
                    )

                body = await resp.text()

                # --- Handle HTTP errors ---
                if resp.status in retry.retryable_status_codes:
                    logger.warning(
                        "Retryable %d from %s.%s: %s",
                        resp.status,
                        ctx.source,
                        ctx.method,
                        body[:200],
                    )
                    error_cls = RateLimitError if resp.status == 429 else DataSourceError
                    last_error = error_cls(
                        ctx.source,
                        f"HTTP {resp.status}: {body[:200]}",
                        status_code=resp.status,
                    )
                    if resp.status == 429:
                        retry_after = _parse_retry_after(resp.headers.get("Retry-After"))

                elif resp.status >= 400:
                    raise DataSourceError(
                        ctx.source,
                        f"HTTP {resp.status}: {body[:500]}",
                        status_code=resp.status,
                    )

                else:
                    # --- Success ---
                    data = self._decode(body, ctx) if expect_json else body
                    logger.info(
                        "Success [%s.%s] elapsed=%.2fs cached=False",
                        ctx.source,
                        ctx.method,
                        time.monotonic() - start,
                    )
                    if use_cache:
                        self._cache.set(cache_namespace, cache_request, data)
                    return data

            except asyncio.TimeoutError:
                elapsed = time.monotonic() - start
                last_error = DataSourceError(
                    ctx.source, f"Timeout after {elapsed:.1f}s"
                )
                logger.warning(
                    "Timeout [%s.%s] attempt=%d elapsed=%.1fs",
                    ctx.source,
                    ctx.method,
                    attempt + 1,
                    elapsed,
                )

            except aiohttp.ClientError as e:
                last_error = DataSourceError(ctx.source, f"Connection error: {e}")
                logger.warning(
                    "Connection error [%s.%s] attempt=%d: %s",
                    ctx.source,
                    ctx.method,
                    attempt + 1,
                    e,
                )

            # Exponential backoff before next attempt
            if attempt < retry.max_retries:
                delay = retry_after if retry_after is not None else min(
                    retry.base_delay * (retry.backoff_factor**attempt),
                    retry.max_delay,
                )
                await asyncio.sleep(delay)

        logger.error(
            "All attempts exhausted [%s.%s] after %.1fs: %s",
            ctx.source,
            ctx.method,
            time.monotonic() - start,
            last_error,
        )
        assert last_error is not None
        raise last_error

    def _decode(self, body: str, ctx: RequestContext) -> Any:
        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise DataSourceError(ctx.source, f"Malformed JSON payload: {e}")

    # -- Convenience methods for subclasses ----------------------------------

    async def _rest_get(
        self,
        url: str,
        params: dict[str, Any],
        *,
        headers: dict[str, str] | None = None,
        context: RequestContext | None = None,
    ) -> Any:
        """GET returning decoded JSON."""
        return await self._request(
            "GET",
            url,
            params=params,
            headers=headers,
            cache_namespace=f"{self._source_name}_get",
            context=context,
        )

    async def _rest_get_text(
        self,
        url: str,
        params: dict[str, Any],
        *,
        headers: dict[str, str] | None = None,
        context: RequestContext | None = None,
    ) -> str:
        """GET returning the raw body (XML endpoints such as PubMed efetch)."""
        return await self._request(
            "GET",
            url,
            params=params,
            headers=headers,
            expect_json=False,
            cache_namespace=f"{self._source_name}_text",
            context=context,
        )

    async def _rest_post(
        self,
        url: str,
        json_body: dict[str, Any],
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        context: RequestContext | None = None,
    ) -> Any:
        """POST a JSON body and return decoded JSON."""
        return await self._request(
            "POST",
            url,
            params=params,
            json_body=json_body,
            headers={"Content-Type": "application/json", **(headers or {})},
            cache_namespace=f"{self._source_name}_post",
            context=context,
        )


def _parse_retry_after(value: str | None) -> float | None:
    try:
        return float(value) if value else None
    except ValueError:
        return None


# ---------------------------------------------------------------------------
# Source adapter contract
# ---------------------------------------------------------------------------


class SourceAdapter(BaseClient):
    """
    A client for one bibliographic database that answers a literature search.

    Subclasses implement ``_search``, which may raise freely. The public
    ``search`` never raises: it times the whole call (every sub-request
    included), cancels it once ``timeout_seconds`` have passed, and turns
    any failure into a ``SourceResult`` carrying ``error`` and no papers.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        super().__init__(config or ClientConfig.from_settings(self.settings))

    @abstractmethod
    async def _search(self, query: str, max_results: int) -> tuple[list[Paper], int]:
        """Return (papers, total available at the source)."""
        ...

    async def search(
        self, query: str, max_results: int = DEFAULT_MAX_RESULTS
    ) -> SourceResult:
        start = time.monotonic()
        try:
            async with asyncio.timeout(self.config.timeout_seconds):
                papers, total = await self._search(query, max_results)
        except TimeoutError:
            return self._failed(
                start,
                DataSourceError(
                    self._source_name,
                    f"Timed out after {self.config.timeout_seconds:g}s",
                ),
            )
        except Exception as e:
            return self._failed(start, e)

        elapsed_ms = (time.monotonic() - start) * 1000
        logger.info(
            "Search [%s] returned %d of %d papers in %.0fms",
            self._source_name,
            len(papers),
            total,
            elapsed_ms,
        )
        return SourceResult(
            source_name=self._source_name,
            papers=papers,
            total_available_count=total,
            elapsed_ms=elapsed_ms,
        )

    def _failed(self, start: float, error: Exception) -> SourceResult:
        elapsed_ms = (time.monotonic() - start) * 1000
        logger.warning(
            "Search failed [%s] after %.0fms: %s", self._source_name, elapsed_ms, error
        )
        return SourceResult(
            source_name=self._source_name,
            papers=[],
            total_available_count=0,
            elapsed_ms=elapsed_ms,
            error=_error_message(error),
        )


def _error_message(error: Exception) -> str:
    if isinstance(error, DataSourceError):
        return str(error)
    return f"{type(error).__name__}: {error}" if str(error) else type(error).__name__
