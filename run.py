import argparse
import logging
import sys

from timesync import config
from timesync.container import Container, create_container
from timesync.domain.exit_code import ExitCode
from timesync.exceptions import AlreadyRunningError, ConfigError
from timesync.logging_config import configure_logging
from timesync.services.url_candidates import build_candidate_urls

logger = logging.getLogger("timesync")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="timesync",
        description="Set the system clock from the Date header of HTTPS servers.",
    )
    p.add_argument(
        "--config",
        default=None,
        help=f"Path to a YAML settings file (default: ${config.CONFIG_FILE_ENV}).",
    )
    return p.parse_args(argv)


def main(argv: list[str] | None = None, container: Container | None = None) -> int:
    args = _parse_args(argv)

    try:
        config.load_env_file()
        settings = config.load_settings(config_file=args.config)
    except ConfigError as e:
        logger.error("%s", e)
        return ExitCode.CONFIG_ERROR

    configure_logging(settings.log_dir)

    if container is None:
        container = create_container(settings)

    lock = container.process_lock()
    try:
        lock.acquire()
    except AlreadyRunningError:
        logger.error("TimeSync is already running.")
        return ExitCode.ALREADY_RUNNING

    try:
        targets = build_candidate_urls(settings)
        if not targets:
            logger.error("No target URLs configured. Please set TimeUrls/TimeHosts/TimePorts.")
            return ExitCode.NO_TARGETS

        logger.info("%d candidate URL(s): %s", len(targets), ", ".join(targets))
        return container.run_controller().run(targets, run_once=settings.run_once)
    except KeyboardInterrupt:
        logger.info("Shutting down")
        return ExitCode.OK
    finally:
        lock.release()


if __name__ == '__main__':
    sys.exit(main())
