import logging

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration


def init_sentry(dsn: str, environment: str = "local",
                release: str | None = None) -> bool:
    """Enable Sentry only when a DSN is configured."""
    if not dsn:
        return False
    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        release=release,
        integrations=[
            # breadcrumbs from INFO, events from ERROR log records
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
            FastApiIntegration(),
        ],
        traces_sample_rate=0.2,
        send_default_pii=False,
    )
    return True
