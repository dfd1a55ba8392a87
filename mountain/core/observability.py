import sentry_sdk

from mountain.settings import Settings


def init_sentry(app_settings: Settings, component: str = "api") -> bool:
    """Initialize Sentry SDK when DSN is configured.

    `component` tags events so API and CLI renders can be told apart.
    Returns whether the SDK was initialized.
    """

    if not app_settings.sentry_dsn:
        return False

    sentry_sdk.init(
        dsn=app_settings.sentry_dsn,
        environment=app_settings.environment,
        release=app_settings.release,
        traces_sample_rate=app_settings.sentry_traces_sample_rate,
        send_default_pii=False,
    )
    sentry_sdk.set_tag("component", component)
    return True
