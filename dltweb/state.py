from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from flask import current_app

from dltsync.analysis import AnalysisClient
from dltsync.config import EngineSettings
from dltsync.reconciler import Reconciler
from dltsync.synchronizer import HistorySynchronizer

EXTENSION_KEY = "dltsync"


@dataclass
class HistoryContext:
    settings: EngineSettings
    reconciler: Reconciler
    synchronizer: HistorySynchronizer
    analysis_client: Optional[AnalysisClient] = None


def get_context() -> HistoryContext:
    return current_app.extensions[EXTENSION_KEY]
