"""Worker pour exécuter l'export dans un thread."""

from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import QObject, QThread, Signal

from fuzzypair.config import Config
from fuzzypair.export import build_mapping_csv
from fuzzypair.pipeline import PipelineResult, export_pipeline

logger = logging.getLogger(__name__)


class ExportWorker(QThread):
    """Thread exécutant export_pipeline + build_mapping_csv."""

    finished = Signal(object)  # list[str] des fichiers écrits
    error = Signal(str)

    def __init__(
        self,
        result: PipelineResult,
        config: Config,
        out_xlsx: str | Path,
        out_csv: str | Path | None = None,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._result = result
        self._config = config
        self._out_xlsx = Path(out_xlsx)
        self._out_csv = Path(out_csv) if out_csv else None

    def run(self) -> None:
        try:
            written = [str(p) for p in export_pipeline(self._result, self._config, self._out_xlsx)]
            if self._out_csv is not None:
                build_mapping_csv(self._result.outcome, self._out_csv)
                written.append(str(self._out_csv))
            self.finished.emit(written)
        except Exception as e:
            logger.exception("Échec de l'export")
            self.error.emit(str(e))
