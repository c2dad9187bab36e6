"""Fenêtre principale : navigation et orchestration."""

from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QHBoxLayout,
    QMainWindow,
    QMessageBox,
    QProgressDialog,
    QPushButton,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from fuzzypair.config import Config
from fuzzypair.pipeline import PipelineResult
from fuzzypair_gui.screens import ProjectScreen, ResultsScreen
from fuzzypair_gui.state import AppState
from fuzzypair_gui.workers import ExportWorker, MatchingWorker


class MainWindow(QMainWindow):
    """Fenêtre principale avec navigation entre écrans."""

    SCREEN_PROJECT = 0
    SCREEN_RESULTS = 1

    def __init__(self) -> None:
        super().__init__()
        self._state = AppState()
        self._matching_worker: MatchingWorker | None = None
        self._export_worker: ExportWorker | None = None
        self._progress: QProgressDialog | None = None
        self._setup_ui()

    def _setup_ui(self) -> None:
        self.setWindowTitle("FuzzyPair - Appariement approximatif")
        self.setMinimumSize(1000, 700)
        self.resize(1200, 800)

        central = QWidget()
        layout = QVBoxLayout(central)

        nav = QHBoxLayout()
        btn_proj = QPushButton("1. Projet")
        btn_proj.clicked.connect(lambda: self._go_to(self.SCREEN_PROJECT))
        btn_results = QPushButton("2. Résultats")
        btn_results.clicked.connect(lambda: self._go_to(self.SCREEN_RESULTS))
        nav.addWidget(btn_proj)
        nav.addWidget(btn_results)
        nav.addStretch()
        layout.addLayout(nav)

        self._stack = QStackedWidget()
        self._project_screen = ProjectScreen(self._state, on_matching_requested=self._run_matching)
        self._results_screen = ResultsScreen(self._state, on_export_requested=self._run_export)
        self._stack.addWidget(self._project_screen)
        self._stack.addWidget(self._results_screen)

        layout.addWidget(self._stack)
        self.setCentralWidget(central)

    def _go_to(self, index: int) -> None:
        if index == self.SCREEN_RESULTS:
            self._results_screen.refresh_data()
        self._stack.setCurrentIndex(index)

    def _show_progress(self, text: str, cancellable: bool) -> QProgressDialog:
        progress = QProgressDialog(text, "Annuler" if cancellable else "", 0, 0, self)
        progress.setWindowModality(Qt.WindowModality.WindowModal)
        progress.setMinimumDuration(0)
        if not cancellable:
            progress.setCancelButton(None)
        return progress

    def _close_progress(self) -> None:
        if self._progress:
            self._progress.close()
            self._progress = None

    def _run_matching(self) -> None:
        """Lance le matching dans un worker (feuilles déjà chargées réutilisées)."""
        config_dict = self._state.build_config_dict()
        base_dir = Path(".")
        if self._state.source_file:
            base_dir = Path(self._state.source_file).parent
        elif self._state.single_file:
            base_dir = Path(self._state.single_file).parent

        self._progress = self._show_progress("Matching en cours...", cancellable=True)
        self._progress.canceled.connect(self._on_matching_canceled)

        self._matching_worker = MatchingWorker(config_dict, base_dir, self._state.frames, self)
        self._matching_worker.progress.connect(self._on_matching_progress)
        self._matching_worker.finished.connect(self._on_matching_finished)
        self._matching_worker.error.connect(self._on_matching_error)
        self._matching_worker.start()
        self._progress.show()

    def _on_matching_canceled(self) -> None:
        if self._matching_worker:
            self._matching_worker.request_cancel()

    def _on_matching_progress(self, n_matches: int, message: str) -> None:
        if self._progress:
            self._progress.setLabelText(f"Matching en cours... {message}")

    def _on_matching_finished(self, result: PipelineResult, config: Config) -> None:
        self._close_progress()
        self._state.result = result
        self._state.config = config
        self._go_to(self.SCREEN_RESULTS)

    def _on_matching_error(self, msg: str) -> None:
        self._close_progress()
        QMessageBox.critical(self, "Erreur matching", msg)

    def _run_export(self, xlsx_path: str, csv_path: str | None) -> None:
        """Lance l'export dans un worker."""
        if self._state.result is None or self._state.config is None:
            QMessageBox.critical(self, "Erreur", "Aucun résultat. Relancez le matching.")
            return

        self._progress = self._show_progress("Export en cours...", cancellable=False)
        self._export_worker = ExportWorker(self._state.result, self._state.config, xlsx_path, csv_path, self)
        self._export_worker.finished.connect(self._on_export_finished)
        self._export_worker.error.connect(self._on_export_error)
        self._export_worker.start()
        self._progress.show()

    def _on_export_finished(self, paths: list[str]) -> None:
        self._close_progress()
        self._results_screen.set_success(paths)

    def _on_export_error(self, msg: str) -> None:
        self._close_progress()
        QMessageBox.critical(self, "Erreur export", msg)
