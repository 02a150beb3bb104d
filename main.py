"""Entry point for invoking a fetch run via the CLI."""

from __future__ import annotations

import asyncio
import sys

from feed_eater.cli import main as cli_main

if __name__ == "__main__":
    sys.exit(asyncio.run(cli_main()))
