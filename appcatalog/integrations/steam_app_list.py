"""Steam catalog listing client.

Fetches the full (app id, name) listing from ISteamApps/GetAppList/v2. The
result feeds ``AppDatabase.integrate_app_list`` which creates name-only stubs
for apps the database has not seen yet.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import requests

from appcatalog.core.errors import FeedError

logger = logging.getLogger("appcatalog.steam_app_list")

__all__ = ["SteamAppListClient", "parse_app_list"]

_BASE_DELAY = 1.0
_MAX_RETRIES = 3
_API_URL = "https://api.steampowered.com/ISteamApps/GetAppList/v2/"


def parse_app_list(payload: dict[str, Any]) -> list[tuple[int, str]]:
    """Extracts (app id, name) pairs from a GetAppList response.

    Items without a usable integer ``appid`` are skipped.

    Args:
        payload: Decoded JSON response (``{"applist": {"apps": [...]}}``).

    Returns:
        List of (app_id, name) tuples in response order.

    Raises:
        FeedError: If the payload does not contain an app list.
    """
    try:
        apps = payload["applist"]["apps"]
    except (KeyError, TypeError) as exc:
        raise FeedError(f"GetAppList payload has no app list: {exc}") from exc
    if not isinstance(apps, list):
        raise FeedError("GetAppList 'apps' is not a list")

    pairs: list[tuple[int, str]] = []
    skipped = 0
    for item in apps:
        try:
            app_id = int(item["appid"])
        except (KeyError, TypeError, ValueError):
            skipped += 1
            continue
        name = item.get("name") or ""
        pairs.append((app_id, str(name)))

    if skipped:
        logger.warning("Skipped %d malformed app list items", skipped)
    return pairs


class SteamAppListClient:
    """Blocking client for the public Steam app listing.

    Attributes:
        url: Endpoint to query.
        timeout: Per-request timeout in seconds.
    """

    def __init__(self, url: str = _API_URL, timeout: float = 30.0) -> None:
        self.url = url
        self.timeout = timeout

    def fetch_app_list(self) -> list[tuple[int, str]]:
        """Downloads and parses the full app listing.

        Retries with exponential backoff on HTTP 429.

        Returns:
            List of (app_id, name) tuples.

        Raises:
            FeedError: On network failure, HTTP error or unusable payload.
        """
        for attempt in range(_MAX_RETRIES):
            try:
                response = requests.get(self.url, timeout=self.timeout)
                if response.status_code == 429:
                    delay = _BASE_DELAY * (2**attempt)
                    logger.warning("Rate limited (429), retrying in %.1fs...", delay)
                    time.sleep(delay)
                    continue
                response.raise_for_status()
                payload = response.json()
            except requests.RequestException as exc:
                logger.error("Failed to fetch app list: %s", exc)
                raise FeedError(f"App list request failed: {exc}") from exc
            except ValueError as exc:
                logger.error("App list response is not JSON: %s", exc)
                raise FeedError("App list response is not JSON") from exc

            pairs = parse_app_list(payload)
            logger.info("Fetched %d apps from the Steam app list", len(pairs))
            return pairs

        logger.error("Exhausted retries fetching the app list")
        raise FeedError("App list request was rate limited")
