"""Run configuration and its environment-based loader."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Awaitable, Callable, Dict, List, Optional, Union

import orjson
from dotenv import load_dotenv

from feed_eater.constants import DEFAULT_METHOD, ENV_PREFIX
from feed_eater.models import Url

# Hooks may be plain functions or coroutine functions.
Hook = Callable[[str], Union[str, Awaitable[str]]]


@dataclass
class Configuration:
    """Values controlling a single fetch run."""
    # What to fetch
    urls: List[Url] = field(default_factory=list)
    file_path: Optional[Path] = None  # JSON list used when ``urls`` is empty

    # Request shape
    method: str = DEFAULT_METHOD
    headers: Dict[str, str] = field(default_factory=dict)

    # Deadlines
    timeout: int = 0  # per request, milliseconds
    period: float = 0  # whole run, seconds

    # Hooks
    before_eat: Optional[Hook] = None  # rewrites the link before the request
    after_eat: Optional[Hook] = None   # rewrites the body after the response

    use_os_exit_signal: bool = False
    insecure_skip_verify: bool = False
    max_process: int = 0  # <= 0 means one slot per url
    fail_fast: bool = False

    @property
    def concurrency(self) -> int:
        """Number of requests allowed in flight at once."""
        if self.max_process > 0:
            return self.max_process
        return max(1, len(self.urls))


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(ENV_PREFIX + name, default).strip().lower() in ("1", "true", "yes")


def _env_headers() -> Dict[str, str]:
    raw = os.getenv(ENV_PREFIX + "HEADERS")
    if not raw:
        return {}
    data = orjson.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"{ENV_PREFIX}HEADERS must be a JSON object")
    return {str(k): str(v) for k, v in data.items()}


async def initialize_environment() -> Configuration:
    """Load environment variables and build a :class:`Configuration`.

    A ``.env`` file in the working directory is honoured. The URL list is
    only referenced by path here; :func:`feed_eater.validation.verify_configuration`
    loads it.
    """
    load_dotenv()

    file_path = os.getenv(ENV_PREFIX + "FILE")

    return Configuration(
        file_path=Path(file_path) if file_path else None,
        method=os.getenv(ENV_PREFIX + "METHOD", DEFAULT_METHOD).upper(),
        headers=_env_headers(),
        timeout=int(os.getenv(ENV_PREFIX + "TIMEOUT_MS", "5000")),
        period=float(os.getenv(ENV_PREFIX + "PERIOD_SEC", "0")),
        use_os_exit_signal=_env_flag("OS_SIGNALS"),
        insecure_skip_verify=_env_flag("INSECURE"),
        # read once at startup
        max_process=int(os.getenv(ENV_PREFIX + "MAX_PROCESS", "0")),
        fail_fast=_env_flag("FAIL_FAST"),
    )
