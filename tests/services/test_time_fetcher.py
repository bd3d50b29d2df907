import logging
from datetime import datetime, timezone
from unittest.mock import Mock, call

import pytest
import requests

from timesync.domain.http_response import HttpResponse
from timesync.exceptions import HttpFetchError, TimeNotFoundError
from timesync.services.time_fetcher import TimeFetcher

DATE_2030 = "Tue, 01 Jan 2030 00:00:00 GMT"


def _ok(method, headers):
    return HttpResponse(method, 200, headers)


def _refused(url, method):
    return HttpFetchError(url, requests.exceptions.ConnectionError("connection refused"), method=method)


def test_date_from_first_url_skips_the_rest():
    http = Mock()
    http.head.return_value = _ok("HEAD", {"Date": DATE_2030})
    fetcher = TimeFetcher(http)

    fetched = fetcher.fetch(["https://one/", "https://two/"])

    assert fetched.instant == datetime(2030, 1, 1, tzinfo=timezone.utc)
    assert fetched.url == "https://one/"
    assert fetched.method == "HEAD"
    assert fetched.header == "Date"
    http.head.assert_called_once_with("https://one/")
    http.get.assert_not_called()


def test_head_without_headers_falls_back_to_get():
    http = Mock()
    http.head.return_value = _ok("HEAD", {})
    http.get.return_value = _ok("GET", {"Date": DATE_2030})
    fetcher = TimeFetcher(http)

    fetched = fetcher.fetch(["https://one/"])

    assert fetched.method == "GET"
    http.get.assert_called_once_with("https://one/")


def test_head_failure_still_tries_get_on_same_url():
    http = Mock()
    http.head.side_effect = _refused("https://one/", "HEAD")
    http.get.return_value = _ok("GET", {"Date": DATE_2030})
    fetcher = TimeFetcher(http)

    fetched = fetcher.fetch(["https://one/"])

    assert fetched.url == "https://one/"
    assert fetched.method == "GET"


def test_head_disabled_goes_straight_to_get():
    http = Mock()
    http.get.return_value = _ok("GET", {"Date": DATE_2030})
    fetcher = TimeFetcher(http, head_then_get=False)

    fetcher.fetch(["https://one/"])

    http.head.assert_not_called()
    http.get.assert_called_once_with("https://one/")


def test_refused_url_is_logged_and_next_url_last_modified_used(caplog):
    http = Mock()

    def head(url):
        if url == "https://one/":
            raise _refused(url, "HEAD")
        return _ok("HEAD", {"Last-Modified": "Mon, 31 Dec 2029 12:00:00 GMT"})

    def get(url):
        raise _refused(url, "GET")

    http.head.side_effect = head
    http.get.side_effect = get
    fetcher = TimeFetcher(http)

    with caplog.at_level(logging.WARNING):
        fetched = fetcher.fetch(["https://one/", "https://two/"])

    assert fetched.instant == datetime(2029, 12, 31, 12, tzinfo=timezone.utc)
    assert fetched.url == "https://two/"
    assert fetched.header == "Last-Modified"
    assert "Target failed: https://one/" in caplog.text
    assert http.head.call_args_list == [call("https://one/"), call("https://two/")]


def test_every_url_failing_raises_aggregate_error():
    http = Mock()
    http.head.return_value = _ok("HEAD", {})

    def get(url):
        raise _refused(url, "GET")

    http.get.side_effect = get
    fetcher = TimeFetcher(http)

    with pytest.raises(TimeNotFoundError) as excinfo:
        fetcher.fetch(["https://one/", "https://two/"])

    err = excinfo.value
    assert err.urls == ["https://one/", "https://two/"]
    assert [(f.url, f.method) for f in err.failures] == [
        ("https://one/", "HEAD"),
        ("https://one/", "GET"),
        ("https://two/", "HEAD"),
        ("https://two/", "GET"),
    ]
    assert "no Date or Last-Modified header" in err.failures[0].reason
    assert "connection refused" in err.failures[1].reason


def test_out_of_range_date_on_first_url_moves_to_next():
    far_future = "Fri, 31 Dec 9999 23:59:59 -0100"
    http = Mock()

    def head(url):
        return _ok("HEAD", {"Date": far_future if url == "https://one/" else DATE_2030})

    http.head.side_effect = head
    http.get.return_value = _ok("GET", {"Date": far_future})
    fetcher = TimeFetcher(http)

    fetched = fetcher.fetch(["https://one/", "https://two/"])

    assert fetched.url == "https://two/"
    assert fetched.instant == datetime(2030, 1, 1, tzinfo=timezone.utc)
    http.get.assert_called_once_with("https://one/")


def test_unexpected_error_on_first_url_moves_to_next(caplog):
    caplog.set_level(logging.WARNING)
    http = Mock()

    def head(url):
        if url == "https://one/":
            raise RuntimeError("bug")
        return _ok("HEAD", {"Date": DATE_2030})

    http.head.side_effect = head
    http.get.side_effect = ValueError("Attempted to set connect timeout to 0")
    fetcher = TimeFetcher(http)

    fetched = fetcher.fetch(["https://one/", "https://two/"])

    assert fetched.url == "https://two/"
    assert "HEAD https://one/ -> unexpected error" in caplog.text
    assert "Target failed: https://one/ (ValueError: Attempted to set connect timeout to 0)" in caplog.text


def test_unexpected_errors_are_recorded_as_failures():
    http = Mock()
    http.head.side_effect = RuntimeError("bug")
    http.get.side_effect = RuntimeError("bug")
    fetcher = TimeFetcher(http)

    with pytest.raises(TimeNotFoundError) as excinfo:
        fetcher.fetch(["https://one/"])

    assert [(f.method, f.reason) for f in excinfo.value.failures] == [
        ("HEAD", "RuntimeError: bug"),
        ("GET", "RuntimeError: bug"),
    ]
