"""Écran Résultats : paires, non-appariés, statistiques et export."""

from __future__ import annotations

from typing import Callable

from PySide6.QtWidgets import (
    QFileDialog,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QTableView,
    QTabWidget,
    QVBoxLayout,
    QWidget,
)

from fuzzypair.report import build_detailed_df, build_simple_df, build_unmatched_df
from fuzzypair_gui.models import DataFrameModel
from fuzzypair_gui.state import AppState


def _table(model: DataFrameModel) -> QTableView:
    view = QTableView()
    view.setModel(model)
    view.horizontalHeader().setStretchLastSection(True)
    view.setAlternatingRowColors(True)
    return view


class ResultsScreen(QWidget):
    """Écran de résultats : onglets paires / non-appariés et export xlsx."""

    def __init__(
        self,
        state: AppState,
        on_export_requested: Callable[[str, str | None], None] | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._state = state
        self._on_export_requested = on_export_requested or (lambda x, y: None)
        self._setup_ui()

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)

        self._stats_label = QLabel("Aucun résultat. Lancez un matching depuis l'écran Projet.")
        self._stats_label.setWordWrap(True)
        layout.addWidget(self._stats_label)

        self._matches_model = DataFrameModel()
        self._unmatched_source_model = DataFrameModel()
        self._unmatched_target_model = DataFrameModel()
        self._tabs = QTabWidget()
        self._tabs.addTab(_table(self._matches_model), "Paires")
        self._tabs.addTab(_table(self._unmatched_source_model), "Source sans match")
        self._tabs.addTab(_table(self._unmatched_target_model), "Cible sans match")
        layout.addWidget(self._tabs, stretch=1)

        out_group = QGroupBox("Export")
        out_layout = QFormLayout()
        self._xlsx_edit = QLineEdit()
        self._xlsx_edit.setPlaceholderText("Chemin fichier xlsx de sortie...")
        self._csv_edit = QLineEdit()
        self._csv_edit.setPlaceholderText("Optionnel : mapping CSV")
        for label, edit, browse in (
            ("xlsx:", self._xlsx_edit, self._browse_xlsx),
            ("mapping.csv:", self._csv_edit, self._browse_csv),
        ):
            row = QHBoxLayout()
            row.addWidget(edit)
            btn = QPushButton("Parcourir")
            btn.clicked.connect(browse)
            row.addWidget(btn)
            out_layout.addRow(label, row)
        out_group.setLayout(out_layout)
        layout.addWidget(out_group)

        self._export_btn = QPushButton("Exporter")
        self._export_btn.setEnabled(False)
        self._export_btn.clicked.connect(self._on_export_clicked)
        layout.addWidget(self._export_btn)

    def refresh_data(self) -> None:
        """Recharge les tableaux depuis le dernier résultat."""
        result, config = self._state.result, self._state.config
        if result is None or config is None:
            return
        outcome, stats = result.outcome, result.stats
        build = build_simple_df if config.simple_mode else build_detailed_df
        self._matches_model.set_dataframe(build(outcome.matches, config, result.df_source, result.df_target))
        self._unmatched_source_model.set_dataframe(
            build_unmatched_df(
                outcome.unmatched_sources, config.source_column, result.df_source, config.additional_source_columns
            )
        )
        self._unmatched_target_model.set_dataframe(
            build_unmatched_df(
                outcome.unmatched_targets, config.target_column, result.df_target, config.additional_target_columns
            )
        )
        self._tabs.setTabText(0, f"Paires ({len(outcome.matches)})")
        self._tabs.setTabText(1, f"Source sans match ({len(outcome.unmatched_sources)})")
        self._tabs.setTabText(2, f"Cible sans match ({len(outcome.unmatched_targets)})")

        dist = stats.score_distribution
        lines = [
            f"Algorithme : {outcome.algorithm}, seuil {outcome.threshold:.2f}",
            f"{stats.total_matches} paires sur {stats.total_source_items} éléments source "
            f"({stats.match_percentage:.2f}%), score moyen {stats.average_score:.2f}%",
            f"Excellent : {dist['excellent']} · Bon : {dist['good']} · Moyen : {dist['fair']} · Faible : {dist['poor']}",
        ]
        if outcome.failures:
            lines.append(f"Échecs de score ignorés : {len(outcome.failures)}")
        lines.extend(f"Avertissement : {w}" for w in outcome.warnings)
        self._stats_label.setText("\n".join(lines))
        self._export_btn.setEnabled(True)

    def _browse_xlsx(self) -> None:
        path, _ = QFileDialog.getSaveFileName(self, "Fichier xlsx de sortie", "", "Excel (*.xlsx)")
        if path:
            self._xlsx_edit.setText(path)

    def _browse_csv(self) -> None:
        path, _ = QFileDialog.getSaveFileName(self, "Fichier mapping CSV", "", "CSV (*.csv)")
        if path:
            self._csv_edit.setText(path)

    def _on_export_clicked(self) -> None:
        xlsx_path = self._xlsx_edit.text().strip()
        if not xlsx_path:
            QMessageBox.warning(self, "Attention", "Indiquez le chemin du fichier xlsx de sortie.")
            return
        if not xlsx_path.endswith(".xlsx"):
            xlsx_path += ".xlsx"
        csv_path = self._csv_edit.text().strip() or None
        self._on_export_requested(xlsx_path, csv_path)

    def set_success(self, paths: list[str]) -> None:
        """Affiche le succès de l'export."""
        msg = "Export réussi:\n" + "\n".join(f"- {p}" for p in paths)
        QMessageBox.information(self, "Export", msg)
