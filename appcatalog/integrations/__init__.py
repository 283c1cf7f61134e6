from __future__ import annotations

__all__: list[str] = [
    "AppInfoRecord",
    "CompletionTimeRecord",
    "HLTBFeedClient",
    "SteamAppListClient",
]

from appcatalog.integrations.appinfo_feed import AppInfoRecord
from appcatalog.integrations.hltb_feed import HLTBFeedClient
from appcatalog.integrations.hltb_models import CompletionTimeRecord
from appcatalog.integrations.steam_app_list import SteamAppListClient
