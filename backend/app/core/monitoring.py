import sentry_sdk

from shiftpay import __version__

from app.core.config import settings


def configure_error_monitoring() -> None:
    if not settings.sentry_dsn:
        return
    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.env,
        release=f"shiftpay@{__version__}",
        traces_sample_rate=0.2,
    )
    sentry_sdk.set_tag("service", "shiftpay-api")


def report_exception(exc: BaseException, **context) -> None:
    """Send ``exc`` to Sentry with ``context`` as tags; no-op without a DSN."""
    if not settings.sentry_dsn:
        return
    for key, value in context.items():
        sentry_sdk.set_tag(key, str(value))
    sentry_sdk.capture_exception(exc)
