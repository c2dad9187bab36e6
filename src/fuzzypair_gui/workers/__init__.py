"""Workers pour exécution asynchrone."""

from fuzzypair_gui.workers.export_worker import ExportWorker
from fuzzypair_gui.workers.matching_worker import MatchingWorker

__all__ = ["ExportWorker", "MatchingWorker"]
