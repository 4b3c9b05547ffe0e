"""HTTP transport for fetching remotely linked images.

:class:`ImageTransport` wraps a single :class:`httpx.Client` for the
duration of a batch.  Each call to :meth:`ImageTransport.fetch`:

1. Sends a ``GET`` (redirects are followed).
2. On ``200`` -- returns the body bytes.
3. On ``429`` / ``5xx`` / network error -- backs off and retries.
4. On any other status, or when attempts run out -- raises
   :class:`~mailpost.errors.MailpostFetchError`.
"""

from __future__ import annotations

import time

import httpx

from mailpost.config import MailpostConfig
from mailpost.errors import MailpostFetchError
from mailpost.observability import get_logger, resolve_metrics

from .retries import RETRYABLE_EXCEPTIONS, compute_backoff, should_retry

log = get_logger("mailpost.remote")


class ImageTransport:
    """Synchronous image fetcher with retry and backoff.

    Parameters
    ----------
    config:
        Supplies timeout, retry policy, ``User-Agent`` and metrics hook.
    client:
        Optional pre-built :class:`httpx.Client`.  When given, the caller
        keeps ownership and :meth:`close` does not close it.
    """

    def __init__(
        self,
        config: MailpostConfig,
        client: httpx.Client | None = None,
    ) -> None:
        self._config = config
        self._metrics = resolve_metrics(config.metrics)
        self._owns_client = client is None
        self._client = client or httpx.Client(
            headers={"User-Agent": config.user_agent},
            timeout=httpx.Timeout(config.fetch_timeout_seconds),
            follow_redirects=True,
        )

    def fetch(self, url: str) -> bytes:
        """Download *url* and return the response body.

        Raises
        ------
        MailpostFetchError
            On a non-retryable status, or when every attempt failed.
        """
        max_attempts = self._config.fetch_max_attempts
        last_status: int | None = None
        last_exception: Exception | None = None

        for attempt in range(max_attempts):
            t0 = time.monotonic()
            try:
                response = self._client.get(url)
            except RETRYABLE_EXCEPTIONS as exc:
                last_exception, last_status = exc, None
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                # Invalid URL, unsupported protocol, too many redirects.
                raise MailpostFetchError(
                    message=f"Failed to fetch {url}: {exc}",
                    context={"url": url, "status_code": None, "attempts": attempt + 1},
                    cause=exc,
                ) from exc
            else:
                last_exception, last_status = None, response.status_code
                self._metrics.timing(
                    "mailpost.fetch_duration_ms",
                    (time.monotonic() - t0) * 1000,
                    tags={"status": str(response.status_code)},
                )
                if response.status_code == 200:
                    return response.content

            if not should_retry(last_status, last_exception, attempt, max_attempts):
                break

            log.warning(
                "Retrying image fetch",
                extra={
                    "extra_fields": {
                        "op": "fetch",
                        "url": url,
                        "attempt": attempt + 1,
                        "status_code": last_status,
                        "error": str(last_exception) if last_exception else None,
                    }
                },
            )
            self._metrics.increment("mailpost.fetch_retries_total")
            time.sleep(
                compute_backoff(
                    attempt,
                    base=self._config.fetch_retry_base_delay,
                    maximum=self._config.fetch_retry_max_delay,
                    jitter=self._config.fetch_retry_jitter,
                )
            )

        context = {"url": url, "status_code": last_status, "attempts": attempt + 1}
        if last_exception is not None:
            raise MailpostFetchError(
                message=f"Failed to fetch {url}: {last_exception}",
                context=context,
                cause=last_exception,
            )
        raise MailpostFetchError(
            message=f"Failed to fetch {url}: HTTP {last_status}",
            context=context,
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> ImageTransport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
