"""Demo daemon for the log handle registry.

Usage:
    python -m loghandles.main
    kill -USR2 <pid>    # reopen every stream, e.g. from a logrotate postrotate hook

Bootstraps a registry, promotes it to settings.base_path, opens
settings.streams and writes a heartbeat line to each stream until
interrupted.
"""

import os
import threading

from loguru import logger

from .config import get_settings
from .logging import setup_logging
from .registry import Registry


def main() -> None:
    """Run the demo daemon."""
    settings = get_settings()

    # Early logging works before the log directory is known
    registry = Registry.bootstrap(level=settings.early_level)
    registry.early_log("Starting loghandles demo (pid={})", os.getpid())

    try:
        settings.base_path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        registry.early_fatal("Cannot create log directory {}: {}", settings.base_path, e)
        raise SystemExit(1) from e

    registry.promote(settings.base_path, rotation_signal=settings.signum)
    setup_logging(level=settings.log_level)
    logger.info("Streams under {}", settings.base_path)

    for name in settings.streams:
        registry.open(name, settings.default_stream_level)
        logger.info("Opened stream {}", name)

    def on_abort(error: OSError) -> None:
        logger.error("Reopen pass aborted, streams left on old files: {}", error)

    coordinator = registry.start_reopen_loop(settings.ignore_prefix, on_abort)
    if settings.signum is not None:
        print(f"Send {settings.signum.name} to {os.getpid()} to reopen logs. Ctrl-C to exit.")

    stop = threading.Event()
    beat = 0
    try:
        while not stop.wait(settings.heartbeat_seconds):
            beat += 1
            for name in settings.streams:
                stream = registry.get_logger(name)
                if stream is not None:
                    stream.info("heartbeat {}", beat)
    except KeyboardInterrupt:
        print("\nShutting down")
    finally:
        coordinator.stop(timeout=5)
        registry.close()
        logger.info("Demo stopped after {} heartbeat(s), {} reopen pass(es)", beat, coordinator.passes)


if __name__ == "__main__":
    main()
