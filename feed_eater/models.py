from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List

if TYPE_CHECKING:
    from feed_eater.telemetry.metrics import Metrics

Feeds = Dict[str, List[str]]


@dataclass(frozen=True, slots=True)
class Url:
    """A link to fetch and the category its body is stored under."""

    category: str
    link: str


@dataclass(slots=True)
class FetchFailure:
    """Why a single request produced no entry."""

    url: Url
    link: str  # the link actually requested, after the before hook
    error_type: str
    message: str


@dataclass
class Harvest:
    """Everything one run produced."""

    feeds: Feeds = field(default_factory=dict)
    failures: List[FetchFailure] = field(default_factory=list)
    timed_out: bool = False
    interrupted: bool = False
    metrics: Metrics | None = None

    @property
    def total(self) -> int:
        return sum(len(bodies) for bodies in self.feeds.values())
