"""HowLongToBeat-Steam bulk completion-time client.

Downloads the cached library dump that maps Steam app ids to HLTB times.
The records are merged by ``AppDatabase.update_from_hltb``.
"""

from __future__ import annotations

import logging

import requests

from appcatalog.core.errors import FeedError
from appcatalog.integrations.hltb_models import CompletionTimeRecord, parse_hltb_payload

logger = logging.getLogger("appcatalog.hltb_feed")

__all__ = ["CompletionTimeRecord", "HLTBFeedClient"]

_HLTB_URL = "https://www.howlongtobeatsteam.com/api/games/library/cached/all"


class HLTBFeedClient:
    """Blocking client for the HowLongToBeat-Steam library dump.

    Attributes:
        url: Endpoint to query.
        timeout: Request timeout in seconds.
    """

    def __init__(self, url: str = _HLTB_URL, timeout: float = 30.0) -> None:
        self.url = url
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers["Accept"] = "application/json"

    def fetch_all(self) -> list[CompletionTimeRecord]:
        """Fetches and validates every record in the dump.

        Returns:
            Validated records; malformed items are dropped and logged.

        Raises:
            FeedError: On network failure, HTTP error or unusable payload.
        """
        try:
            response = self._session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            response.encoding = "utf-8"
            payload = response.json()
        except requests.RequestException as exc:
            logger.error("Failed to fetch HLTB data: %s", exc)
            raise FeedError(f"HLTB request failed: {exc}") from exc
        except ValueError as exc:
            logger.error("HLTB response is not JSON: %s", exc)
            raise FeedError("HLTB response is not JSON") from exc

        try:
            records, skipped = parse_hltb_payload(payload)
        except ValueError as exc:
            raise FeedError(str(exc)) from exc

        logger.info("Fetched %d HLTB records (%d skipped)", len(records), skipped)
        return records
