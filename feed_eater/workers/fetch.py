"""Worker that fetches one url and stores its body."""

from __future__ import annotations

import asyncio
import inspect
import logging
from time import perf_counter

from feed_eater.aggregator import FeedAggregator
from feed_eater.clients.http import REQUEST_ERRORS, EaterClient
from feed_eater.config import Configuration, Hook
from feed_eater.errors import FetchError
from feed_eater.limiter import FetchLimiter
from feed_eater.models import FetchFailure, Url
from feed_eater.telemetry.metrics import Metrics

logger = logging.getLogger(__name__)


async def apply_hook(hook: Hook, data: str) -> str:
    """Run a before/after hook, awaiting it if it is a coroutine function."""
    result = hook(data)
    if inspect.isawaitable(result):
        result = await result
    return result


async def fetch_worker(
    url: Url,
    config: Configuration,
    client: EaterClient,
    aggregator: FeedAggregator,
    limiter: FetchLimiter,
    metrics: Metrics,
) -> None:
    """
    Fetch ``url`` and append the (possibly rewritten) body to its category.

    A request that fails is dropped: nothing is written to the feeds and the
    failure goes to the aggregator's failure list instead. With
    ``config.fail_fast`` the failure is raised as :class:`FetchError`.
    Exceptions raised by the hooks are not caught.
    """
    async with limiter:
        link = url.link
        if config.before_eat is not None:
            link = await apply_hook(config.before_eat, link)

        metrics.inc("requests_total")
        start = perf_counter()
        try:
            response = await client.fetch(link)
        except asyncio.CancelledError:
            metrics.inc("requests_cancelled")
            raise
        except REQUEST_ERRORS as exc:
            metrics.inc("requests_failed")
            metrics.record_error(exc)
            logger.warning(
                "Dropping %s [%s]: %s: %s", link, url.category, type(exc).__name__, exc)
            aggregator.record_failure(FetchFailure(
                url=url,
                link=link,
                error_type=type(exc).__name__,
                message=str(exc) or type(exc).__name__,
            ))
            if config.fail_fast:
                raise FetchError(link, exc) from exc
            return

        metrics.observe_stage("fetch", perf_counter() - start)
        metrics.add_bytes(len(response.content))

        body = response.text
        if config.after_eat is not None:
            body = await apply_hook(config.after_eat, body)

        aggregator.add(url.category, body)
        metrics.inc("requests_succeeded")
