"""Sentry error tracking integration.

Initializes Sentry SDK if SENTRY_DSN env variable is set.
Does nothing otherwise, so it is safe to call unconditionally.
"""

import logging

from visibility.core.config import Settings
from visibility.core.config import settings as default_settings

logger = logging.getLogger(__name__)


def init_sentry(config: Settings | None = None) -> bool:
    """Initialize Sentry if SENTRY_DSN is configured. Returns True when enabled."""
    config = config or default_settings
    if not config.sentry_dsn:
        logger.debug("Sentry DSN not configured, skipping")
        return False

    import sentry_sdk
    from sentry_sdk.integrations.asyncio import AsyncioIntegration
    from sentry_sdk.integrations.httpx import HttpxIntegration

    sentry_sdk.init(
        dsn=config.sentry_dsn,
        environment=config.app_env,
        traces_sample_rate=0.1 if config.app_env == "production" else 1.0,
        send_default_pii=False,
        integrations=[
            AsyncioIntegration(),
            HttpxIntegration(),
        ],
    )
    logger.info("Sentry initialized (env=%s)", config.app_env)
    return True
