import requests
import urllib3
from requests.structures import CaseInsensitiveDict

from timesync.domain.http_response import HttpResponse
from timesync.exceptions import HttpFetchError

# Lets the receiving side recognise (and e.g. skip logging) sync traffic.
MARKER_HEADER = "X-TimeSync"


class HttpService:
    """
    HTTP client wrapper that only cares about response headers.

    Requires a requests-compatible session for dependency injection, so one
    connection pool is shared by every attempt and tests can pass a Mock.
    """

    def __init__(self, user_agent: str, session: requests.Session, timeout: int = 12, ignore_ssl_errors: bool = False):
        self.user_agent = user_agent
        self.timeout = timeout
        self.session = session
        self.verify = not ignore_ssl_errors
        if ignore_ssl_errors:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def head(self, url: str) -> HttpResponse:
        return self._send("HEAD", url)

    def get(self, url: str) -> HttpResponse:
        return self._send("GET", url)

    def _send(self, method: str, url: str) -> HttpResponse:
        headers = {"User-Agent": self.user_agent, MARKER_HEADER: "1"}
        try:
            # stream=True: only the headers are needed, the body is never downloaded
            resp = self.session.request(
                method,
                url,
                headers=headers,
                timeout=self.timeout,
                verify=self.verify,
                stream=True,
            )
        except requests.exceptions.RequestException as e:
            raise HttpFetchError(url, e, method=method) from e

        try:
            return HttpResponse(method, resp.status_code, CaseInsensitiveDict(resp.headers))
        finally:
            resp.close()
