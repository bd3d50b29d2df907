import os
import re
import logging
from pathlib import Path
from typing import Any, Mapping, Optional

from dotenv import load_dotenv

from timesync.domain.settings import DEFAULT_LOCK_FILE, DEFAULT_USER_AGENT, SyncSettings
from timesync.services.config_file_store import ConfigFileStore

ENV_PREFIX = "TIMESYNC_"
CONFIG_FILE_ENV = ENV_PREFIX + "CONFIG_FILE"

_TRUE = ("true", "1", "yes", "on")
_FALSE = ("false", "0", "no", "off")


def load_env_file() -> None:
	"""Load a `.env` file from the working directory into the environment."""
	env_file = Path(".env")
	loaded = load_dotenv(env_file)
	if not loaded and env_file.exists():
		raise RuntimeError(".env file present but failed to load")


def env_var_name(key: str) -> str:
	"""'IgnoreSslErrors' -> 'TIMESYNC_IGNORE_SSL_ERRORS'."""
	return ENV_PREFIX + re.sub(r"(?<!^)(?=[A-Z])", "_", key).upper()


def _get_raw(key: str, file_values: Mapping[str, Any], environ: Mapping[str, str]) -> Any:
	raw = environ.get(env_var_name(key))
	if raw is not None and raw != "":
		return raw
	return file_values.get(key)


def _get_bool(key: str, raw: Any, default: bool) -> bool:
	if raw is None:
		return default
	if isinstance(raw, bool):
		return raw
	value = str(raw).strip().lower()
	if value in _TRUE:
		return True
	if value in _FALSE:
		return False
	logging.warning("Invalid %s: %r, using default %r", key, raw, default)
	return default


def _get_optional_int(key: str, raw: Any, minimum: Optional[int] = None) -> Optional[int]:
	if raw is None or raw == "":
		return None
	if isinstance(raw, bool):
		logging.warning("Invalid %s: %r", key, raw)
		return None
	try:
		value = int(str(raw).strip())
	except ValueError:
		logging.exception("Invalid %s: %r", key, raw)
		return None
	if minimum is not None and value < minimum:
		logging.warning("Invalid %s: %r, must be at least %d", key, raw, minimum)
		return None
	return value


def _get_int(key: str, raw: Any, default: int, minimum: Optional[int] = None) -> int:
	value = _get_optional_int(key, raw, minimum)
	return default if value is None else value


def _get_csv(raw: Any, default: tuple[str, ...] = ()) -> tuple[str, ...]:
	"""Split a comma-separated value (or a YAML list) into trimmed, non-empty items."""
	if raw is None:
		return default
	items = raw if isinstance(raw, (list, tuple)) else str(raw).split(",")
	return tuple(s for s in (str(item).strip() for item in items) if s)


def _get_str(raw: Any, default: str) -> str:
	if raw is None:
		return default
	value = str(raw).strip()
	return value or default


def config_file_from_env(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
	environ = os.environ if environ is None else environ
	return environ.get(CONFIG_FILE_ENV) or None


def load_settings(config_file: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> SyncSettings:
	"""Build `SyncSettings` from environment variables, the YAML file and defaults, in that order.

	Raises `ConfigFileError` if `config_file` is given but unusable.
	"""
	environ = os.environ if environ is None else environ
	if config_file is None:
		config_file = config_file_from_env(environ)
	file_values = ConfigFileStore(config_path=config_file).load_yaml_dict()

	def raw(key: str) -> Any:
		return _get_raw(key, file_values, environ)

	return SyncSettings(
		ignore_ssl_errors=_get_bool("IgnoreSslErrors", raw("IgnoreSslErrors"), True),
		http_timeout_sec=_get_int("HttpTimeoutSec", raw("HttpTimeoutSec"), 12, minimum=1),
		use_head_then_get=_get_bool("UseHeadThenGet", raw("UseHeadThenGet"), True),
		run_once=_get_bool("RunOnce", raw("RunOnce"), True),
		loop_interval_minutes=_get_int("LoopIntervalMinutes", raw("LoopIntervalMinutes"), 1, minimum=0),
		startup_delay_minutes=_get_optional_int("StartupDelayMinutes", raw("StartupDelayMinutes"), minimum=0),
		retry_delay_minutes=_get_optional_int("RetryDelayMinutes", raw("RetryDelayMinutes"), minimum=0),
		time_urls=_get_csv(raw("TimeUrls")),
		time_hosts=_get_csv(raw("TimeHosts")),
		time_ports=_get_csv(raw("TimePorts")),
		time_paths=_get_csv(raw("TimePaths"), default=("/",)),
		fallback_time_urls=_get_csv(raw("FallbackTimeUrls")),
		user_agent=_get_str(raw("UserAgent"), DEFAULT_USER_AGENT),
		log_dir=_get_str(raw("LogDir"), "log"),
		lock_file=_get_str(raw("LockFile"), DEFAULT_LOCK_FILE),
	)
