"""Top level orchestration of a concurrent fetch-and-aggregate run."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Set

import httpx

from feed_eater.aggregator import FeedAggregator
from feed_eater.clients.http import EaterClient
from feed_eater.config import Configuration
from feed_eater.limiter import FetchLimiter
from feed_eater.models import Feeds, Harvest
from feed_eater.telemetry.metrics import Metrics
from feed_eater.validation import verify_configuration
from feed_eater.watchdog import DEADLINE, SIGNAL, Watchdog
from feed_eater.workers.fetch import fetch_worker

logger = logging.getLogger(__name__)


async def fetcher(
    config: Configuration,
    aggregator: FeedAggregator,
    client: EaterClient,
    metrics: Metrics,
    watchdog: Optional[Watchdog] = None,
) -> bool:
    """Run one fetch task per url and wait for all of them.

    Returns ``True`` when every task finished, ``False`` when ``watchdog``
    tripped first. In both cases no task is left running on return.

    The first task that raises (a hook fault, or a :class:`FetchError`
    under ``fail_fast``) cancels its siblings and the exception propagates.
    """
    limiter = FetchLimiter(config.concurrency)
    tasks = [
        asyncio.create_task(
            fetch_worker(url, config, client, aggregator, limiter, metrics),
            name=f"fetch-{i}",
        )
        for i, url in enumerate(config.urls)
    ]
    stopper: Optional[asyncio.Task[None]] = None
    if watchdog is not None:
        stopper = asyncio.create_task(watchdog.wait(), name="watchdog-wait")

    pending: Set[asyncio.Task[None]] = set(tasks)
    try:
        while pending:
            waiters = (pending | {stopper}) if stopper is not None else pending
            done, _ = await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)

            if stopper is not None and stopper in done:
                logger.warning(
                    "Stopped with %d of %d requests still running", len(pending), len(tasks))
                return False

            for task in done:
                pending.discard(task)
                if task.cancelled():
                    continue
                exc = task.exception()
                if exc is not None:
                    logger.error(
                        "Unrecovered fault in %s; aborting %d pending requests",
                        task.get_name(), len(pending), exc_info=exc,
                    )
                    raise exc
        return True
    finally:
        for task in pending:
            task.cancel()
        if stopper is not None:
            stopper.cancel()
            pending.add(stopper)
        await asyncio.gather(*pending, return_exceptions=True)


async def eat(
    config: Optional[Configuration],
    transport: Optional[httpx.AsyncBaseTransport] = None,
    watchdog: Optional[Watchdog] = None,
) -> Harvest:
    """Verify ``config``, fetch every url and return the collected feeds.

    Parameters
    ----------
    config:
        Run configuration; see :func:`verify_configuration` for what is
        checked. :class:`~feed_eater.errors.HandlerError` is raised before
        any request when it is invalid.
    transport:
        Optional :mod:`httpx` transport, mainly for tests.
    watchdog:
        Optional cancellation token. Embedding programs can call
        :meth:`Watchdog.trip` on it to stop the run early; a fresh one is
        created otherwise.
    """
    if watchdog is None:
        watchdog = Watchdog()

    aggregator = FeedAggregator()
    metrics = Metrics()
    completed = True
    try:
        verified = await verify_configuration(config, watchdog)
        if verified.use_os_exit_signal:
            watchdog.listen_signals()

        logger.info(
            "Fetching %d urls in %d categories (concurrency=%d)",
            len(verified.urls),
            len({u.category for u in verified.urls}),
            verified.concurrency,
        )
        async with EaterClient(verified, transport) as client:
            completed = await fetcher(verified, aggregator, client, metrics, watchdog)
    finally:
        watchdog.stop()

    harvest = Harvest(
        feeds=aggregator.snapshot(),
        failures=aggregator.failures,
        timed_out=not completed and watchdog.reason == DEADLINE,
        interrupted=not completed and watchdog.reason == SIGNAL,
        metrics=metrics,
    )
    logger.info(
        "Completed. Entries: %d  Failures: %d%s",
        harvest.total,
        len(harvest.failures),
        "" if completed else f"  (stopped early: {watchdog.reason})",
    )
    txt, _ = metrics.summary()
    logger.debug("\n%s", txt)
    return harvest


def eat_it(config: Optional[Configuration]) -> Feeds:
    """Blocking wrapper around :func:`eat` returning only the feeds mapping."""
    return asyncio.run(eat(config)).feeds
