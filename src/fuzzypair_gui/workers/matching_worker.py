"""Worker pour exécuter le matching dans un thread."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd
from PySide6.QtCore import QObject, QThread, Signal

from fuzzypair.config import Config
from fuzzypair.matching.schema import MatchEvent
from fuzzypair.pipeline import run_pipeline

logger = logging.getLogger(__name__)


class MatchingWorker(QThread):
    """Thread exécutant run_pipeline (chargement si besoin + Linker.run())."""

    finished = Signal(object, object)  # PipelineResult, Config
    progress = Signal(int, str)  # nb matches, message
    error = Signal(str)
    cancel_requested = False

    def __init__(
        self,
        config_dict: dict,
        base_dir: Path | None = None,
        frames: tuple[pd.DataFrame, pd.DataFrame] | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._config_dict = config_dict
        self._base_dir = base_dir or Path(".")
        self._frames = frames
        self._n_matches = 0

    def request_cancel(self) -> None:
        """Demande l'annulation (best-effort : le résultat est ignoré à la fin)."""
        self.cancel_requested = True

    def _on_event(self, event: MatchEvent) -> None:
        if event.kind == "matched":
            self._n_matches += 1
            if self._n_matches % 50 == 0:
                self.progress.emit(self._n_matches, f"{self._n_matches} matches")
        elif event.kind in ("fallback", "capped", "exhausted", "completed"):
            self.progress.emit(self._n_matches, event.message)

    def run(self) -> None:
        self.cancel_requested = False
        self._n_matches = 0
        try:
            config = Config.from_dict(self._config_dict)
            config.resolve_paths(self._base_dir)
            result = run_pipeline(config, on_event=self._on_event, frames=self._frames)
            if self.cancel_requested:
                self.error.emit("Annulation demandée")
                return
            self.finished.emit(result, config)
        except Exception as e:
            logger.exception("Échec du matching")
            self.error.emit(str(e))
