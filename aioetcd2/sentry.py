import os
import sentry_sdk
from sentry_sdk.integrations.aiohttp import AioHttpIntegration

def setup_sentry() -> bool:
    dsn = os.environ.get('SENTRY_URL', '')
    if dsn:
        sentry_sdk.init(
            dsn=dsn,
            integrations=[AioHttpIntegration()]
        )
        return True
    return False
