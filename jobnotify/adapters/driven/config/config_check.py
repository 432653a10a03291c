"""Configuration check for container orchestration and CI pre-flight."""

import logging

from jobnotify.adapters.driven.config.settings import load_settings
from jobnotify.adapters.driven.logging.logging_config import configure_logs

__all__ = ["main"]

logger = logging.getLogger(__name__)


def main() -> int:
    """Check that a notification could be sent with the current configuration.

    Validates:
    - Required environment variables are set.
    - The endpoint matches the chosen transport's address format.
    - The job state file exists and holds a valid job state.

    No notification is sent.

    Returns:
        0 if the configuration is usable, 1 otherwise.
    """
    configure_logs()

    try:
        settings = load_settings()
        settings.load_job_state()
    except Exception as exc:
        logger.error(f"Notifier configuration check FAILED: {exc}")
        return 1

    logger.info("Notifier configuration check OK")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
