"""Tests for the Steam app listing client."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from appcatalog.core.errors import FeedError
from appcatalog.integrations.steam_app_list import SteamAppListClient, parse_app_list


def _response(status_code: int = 200, payload: object = None) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    response.raise_for_status = MagicMock()
    return response


class TestParseAppList:
    """Tests for parse_app_list()."""

    def test_pairs_in_order(self) -> None:
        payload = {"applist": {"apps": [{"appid": 440, "name": "TF2"}, {"appid": 10, "name": "CS"}]}}
        assert parse_app_list(payload) == [(440, "TF2"), (10, "CS")]

    def test_missing_name_becomes_empty(self) -> None:
        assert parse_app_list({"applist": {"apps": [{"appid": 1}]}}) == [(1, "")]

    def test_malformed_items_skipped(self) -> None:
        payload = {"applist": {"apps": [{"name": "no id"}, {"appid": "abc"}, "junk", {"appid": "7", "name": "ok"}]}}
        assert parse_app_list(payload) == [(7, "ok")]

    def test_missing_list_raises(self) -> None:
        with pytest.raises(FeedError):
            parse_app_list({"response": {}})

    def test_non_list_apps_raises(self) -> None:
        with pytest.raises(FeedError):
            parse_app_list({"applist": {"apps": {"440": "TF2"}}})


class TestFetchAppList:
    """Tests for SteamAppListClient.fetch_app_list()."""

    @patch("appcatalog.integrations.steam_app_list.requests.get")
    def test_success(self, mock_get: MagicMock) -> None:
        mock_get.return_value = _response(payload={"applist": {"apps": [{"appid": 440, "name": "TF2"}]}})

        client = SteamAppListClient(url="https://example.invalid/applist", timeout=5)
        assert client.fetch_app_list() == [(440, "TF2")]
        mock_get.assert_called_once_with("https://example.invalid/applist", timeout=5)

    @patch("appcatalog.integrations.steam_app_list.time.sleep")
    @patch("appcatalog.integrations.steam_app_list.requests.get")
    def test_retries_on_429(self, mock_get: MagicMock, mock_sleep: MagicMock) -> None:
        """A rate-limited request is retried with growing delays."""
        ok = _response(payload={"applist": {"apps": []}})
        mock_get.side_effect = [_response(429), _response(429), ok]

        assert SteamAppListClient().fetch_app_list() == []
        assert mock_get.call_count == 3
        assert [call.args[0] for call in mock_sleep.call_args_list] == [1.0, 2.0]

    @patch("appcatalog.integrations.steam_app_list.time.sleep")
    @patch("appcatalog.integrations.steam_app_list.requests.get")
    def test_exhausted_retries_raise(self, mock_get: MagicMock, mock_sleep: MagicMock) -> None:
        mock_get.return_value = _response(429)
        with pytest.raises(FeedError, match="rate limited"):
            SteamAppListClient().fetch_app_list()

    @patch("appcatalog.integrations.steam_app_list.requests.get")
    def test_network_error_raises_feed_error(self, mock_get: MagicMock) -> None:
        mock_get.side_effect = requests.ConnectionError("offline")
        with pytest.raises(FeedError):
            SteamAppListClient().fetch_app_list()

    @patch("appcatalog.integrations.steam_app_list.requests.get")
    def test_http_error_raises_feed_error(self, mock_get: MagicMock) -> None:
        response = _response(500)
        response.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
        mock_get.return_value = response
        with pytest.raises(FeedError):
            SteamAppListClient().fetch_app_list()

    @patch("appcatalog.integrations.steam_app_list.requests.get")
    def test_invalid_json_raises_feed_error(self, mock_get: MagicMock) -> None:
        response = _response()
        response.json.side_effect = ValueError("Expecting value")
        mock_get.return_value = response
        with pytest.raises(FeedError, match="not JSON"):
            SteamAppListClient().fetch_app_list()
