from typing import Mapping, NamedTuple


class HttpResponse(NamedTuple):
    """Headers-only view of an HTTP response; the body is never read."""
    method: str
    status_code: int
    headers: Mapping[str, str]
