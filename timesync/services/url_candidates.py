from typing import Iterable

from timesync.domain.settings import SyncSettings


def normalize_path(path: str) -> str:
    return path if path.startswith("/") else "/" + path


def _clean(values: Iterable[str]) -> list[str]:
    return [v for v in (s.strip() for s in values) if v]


def build_candidate_urls(settings: SyncSettings) -> list[str]:
    """Return target URLs in fetch priority order.

    Literal `time_urls` first, then every https://host:port/path combination,
    then `fallback_time_urls`. Duplicates keep their first position. URLs are
    not validated here; a malformed entry simply fails when fetched.
    """
    urls = _clean(settings.time_urls)

    paths = [normalize_path(p) for p in _clean(settings.time_paths)]
    for host in _clean(settings.time_hosts):
        for port in _clean(settings.time_ports):
            for path in paths:
                urls.append(f"https://{host}:{port}{path}")

    urls.extend(_clean(settings.fallback_time_urls))
    return list(dict.fromkeys(urls))
