"""Dependency injection container for the application."""
import time

from dependency_injector import containers, providers
import requests

from timesync.services.http_service import HttpService
from timesync.services.process_lock import ProcessLock
from timesync.services.run_controller import RunController
from timesync.services.system_clock import default_system_clock
from timesync.services.time_fetcher import TimeFetcher


# Configuration keys consumed by the container (see `SyncSettings.as_container_config`).
#
# ignore_ssl_errors (bool)
#   Skip TLS certificate validation on the shared session.
#
# http_timeout_sec (int seconds)
#   Timeout for each HEAD/GET request.
#
# use_head_then_get (bool)
#   Try a HEAD request before the GET for every target.
#
# user_agent (str)
#   User-Agent header for outbound requests.
#
# loop_interval_seconds / retry_delay_seconds / startup_delay_seconds (int seconds)
#   Loop sleep, run-once retry wait and the one-time wait before the first attempt.
#
# lock_file (str)
#   Path of the single-instance lock file.


class Container(containers.DeclarativeContainer):
    """Dependency injection container for timesync."""

    config = providers.Configuration()

    # One session per process so connections are reused across loop iterations
    http_session = providers.Singleton(requests.Session)

    http_service = providers.Singleton(
        HttpService,
        user_agent=config.user_agent.as_(str),
        session=http_session,
        timeout=config.http_timeout_sec.as_(int),
        ignore_ssl_errors=config.ignore_ssl_errors.as_(bool),
    )

    time_fetcher = providers.Singleton(
        TimeFetcher,
        http_service=http_service,
        head_then_get=config.use_head_then_get.as_(bool),
    )

    system_clock = providers.Singleton(default_system_clock)

    process_lock = providers.Factory(
        ProcessLock,
        path=config.lock_file.as_(str),
    )

    run_controller = providers.Singleton(
        RunController,
        fetcher=time_fetcher,
        clock=system_clock,
        loop_interval_seconds=config.loop_interval_seconds.as_(int),
        retry_delay_seconds=config.retry_delay_seconds.as_(int),
        startup_delay_seconds=config.startup_delay_seconds.as_(int),
        sleep=providers.Object(time.sleep),
    )


def create_container(settings) -> Container:
    container = Container()
    container.config.from_dict(settings.as_container_config())
    return container
