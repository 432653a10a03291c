"""Application entrypoint: send one job notification."""

import asyncio
import logging

from jobnotify.adapters.driven.config.settings import Settings, load_settings
from jobnotify.adapters.driven.logging.logging_config import configure_logs
from jobnotify.adapters.driven.transports.proxy import resolve_proxy
from jobnotify.adapters.driven.transports.registry import build_transports
from jobnotify.core.dispatch import Dispatcher
from jobnotify.core.errors import NotificationError
from jobnotify.ports.transport import TransportKind

__all__ = ["main", "notify"]

logger = logging.getLogger(__name__)


async def main() -> int:
    """Send the configured notification.

    Startup sequence:
    1. Configure logging.
    2. Load and validate configuration.
    3. Load and serialize the job state.
    4. Resolve the HTTP proxy (explicit settings, then ``http_proxy``).
    5. Deliver once; no retry.

    Returns:
        0 on delivery, 1 on configuration or delivery failure.
    """
    configure_logs()
    logger.info("Starting notifier...")

    try:
        settings = load_settings()
        job_state = settings.load_job_state()
    except (RuntimeError, ValueError) as exc:
        logger.error(
            "Configuration error: %s\n"
            "Hint: check NOTIFY_PROTOCOL, NOTIFY_ENDPOINT, "
            "JOB_STATE_FILE_PATH and that the job state file exists and is valid JSON.",
            exc,
        )
        return 1

    try:
        payload = settings.format.serialize(job_state)
        await notify(settings, payload)
    except NotificationError as exc:
        logger.error(f"Notification to {settings.endpoint} failed: {exc}", exc_info=True)
        return 1

    logger.info(f"Notification delivered to {settings.endpoint}")
    return 0


async def notify(settings: Settings, payload: bytes) -> None:
    """Deliver an already serialized payload as configured.

    Args:
        settings: Runtime settings.
        payload: Serialized job state.

    Raises:
        NotificationError: On validation, proxy or delivery failure.
    """
    dispatcher = Dispatcher(build_transports(max_redirects=settings.max_redirects))
    proxy = resolve_proxy(settings.proxy) if settings.protocol is TransportKind.HTTP else None

    await dispatcher.send(
        settings.protocol,
        settings.endpoint,
        payload,
        settings.timeout_ms,
        settings.format.is_json,
        proxy=proxy,
    )


if __name__ == "__main__":
    try:
        raise SystemExit(asyncio.run(main()))
    except KeyboardInterrupt:
        logging.getLogger(__name__).info("Shutdown requested by user (Ctrl+C).")
