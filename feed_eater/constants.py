from __future__ import annotations

# ──────────────────────────────────────────────────────────────────────────────
# HTTP client limits
# ──────────────────────────────────────────────────────────────────────────────
CONNECT_TIMEOUT: float = 1.0       # seconds to establish a connection
MAX_REDIRECTS: int = 3             # the 4th redirect is rejected
DEFAULT_METHOD: str = "GET"        # used when the configured method is empty

# ──────────────────────────────────────────────────────────────────────────────
# Environment variables read by feed_eater.config
# ──────────────────────────────────────────────────────────────────────────────
ENV_PREFIX: str = "FEED_EATER_"
