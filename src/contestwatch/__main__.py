"""Entry point for `python -m contestwatch`.

Usage:
    python -m contestwatch
"""

from __future__ import annotations

import sys

from contestwatch import create_config_from_env
from contestwatch.errors import WatcherError
from contestwatch.log import get_logger, setup_logging
from contestwatch.watcher import ContestWatcher


def main() -> int:
    try:
        config = create_config_from_env()
    except WatcherError as e:
        print(f"contestwatch: {e}", file=sys.stderr)
        return 2

    setup_logging(config.log_level, config.log_format)
    log = get_logger(component="main")

    try:
        watcher = ContestWatcher(config)
    except WatcherError as e:
        log.error("startup_failed", code=e.code.value, error=str(e))
        return 2

    log.info(
        "watcher_started",
        interval=config.sampling_period_seconds,
        history_capacity=config.history_capacity,
        short_offset=config.short_offset,
        long_offset=config.long_offset,
    )
    try:
        watcher.run_forever()
    except KeyboardInterrupt:
        log.info("watcher_stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
