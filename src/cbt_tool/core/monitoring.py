"""Sentry integration for error tracking.

Sentry is initialized early in main() after logging setup. Reporting is
disabled unless CBT_SENTRY_DSN is set.
"""

import os

import sentry_sdk

from cbt_tool.__about__ import __version__

SENTRY_DSN_ENV = "CBT_SENTRY_DSN"


def setup_sentry(environment: str = "local") -> None:
    """Initialize Sentry using the DSN from the environment, if any."""
    sentry_sdk.init(
        dsn=os.environ.get(SENTRY_DSN_ENV),
        traces_sample_rate=0.03,
        environment=environment,
        release=__version__,
        attach_stacktrace=True,
        send_default_pii=False,
    )
