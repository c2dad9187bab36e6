"""Écran Projet : fichiers, feuilles, colonnes et paramètres du matching."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtGui import QStandardItemModel
from PySide6.QtWidgets import (
    QAbstractItemView,
    QCheckBox,
    QComboBox,
    QDoubleSpinBox,
    QFileDialog,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QMessageBox,
    QPushButton,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from fuzzypair.config import DEFAULT_ALGORITHM
from fuzzypair.io_excel import SUPPORTED_INPUT_FILTER, list_columns, list_sheets, load_sheet
from fuzzypair.matching.registry import VALID_CATEGORIES, list_algorithms
from fuzzypair_gui.state import AppState

CATEGORY_LABELS = {
    "basic": "Algorithmes de base",
    "advanced": "Algorithmes avancés",
    "search-engine": "Moteurs de recherche (simulés)",
}


def fill_algorithm_combo(combo: QComboBox, selected: str = DEFAULT_ALGORITHM) -> None:
    """Remplit le sélecteur : un en-tête non sélectionnable par catégorie, description en infobulle."""
    combo.clear()
    model = combo.model()
    for category in VALID_CATEGORIES:
        algos = list_algorithms(category)
        if not algos:
            continue
        combo.addItem(f"— {CATEGORY_LABELS.get(category, category)} —")
        header_idx = combo.count() - 1
        if isinstance(model, QStandardItemModel):
            model.item(header_idx).setEnabled(False)
        for a in algos:
            combo.addItem(f"{a.name}  [{a.performance}]", a.id)
            tooltip = a.description
            if a.best_for:
                tooltip += f"\nIdéal pour : {a.best_for}"
            combo.setItemData(combo.count() - 1, tooltip, Qt.ItemDataRole.ToolTipRole)
    idx = combo.findData(selected)
    if idx >= 0:
        combo.setCurrentIndex(idx)


class ProjectScreen(QWidget):
    """Écran de configuration : fichiers source/cible, colonnes, algorithme, seuil."""

    def __init__(
        self,
        state: AppState,
        on_matching_requested: Callable[[], None] | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._state = state
        self._on_matching_requested = on_matching_requested or (lambda: None)
        self._setup_ui()

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)

        self._single_file_cb = QCheckBox("Un seul fichier (2 feuilles)")
        self._single_file_cb.toggled.connect(self._on_single_file_toggled)
        layout.addWidget(self._single_file_cb)

        # Fichiers
        file_group = QGroupBox("Fichiers")
        file_layout = QFormLayout()

        self._source_file_edit, self._source_browse = self._file_row(file_layout, "Source:", "source")
        self._source_sheet_combo = QComboBox()
        self._source_sheet_combo.setMinimumWidth(150)
        file_layout.addRow("Feuille source:", self._source_sheet_combo)
        self._source_header_spin = self._header_spin(self._state.source_header_row)
        file_layout.addRow("Ligne d'en-tête source:", self._source_header_spin)

        self._target_file_edit, self._target_browse = self._file_row(file_layout, "Cible:", "target")
        self._target_sheet_combo = QComboBox()
        file_layout.addRow("Feuille cible:", self._target_sheet_combo)
        self._target_header_spin = self._header_spin(self._state.target_header_row)
        file_layout.addRow("Ligne d'en-tête cible:", self._target_header_spin)

        self._single_file_edit, self._single_browse = self._file_row(file_layout, "Fichier unique:", "single")
        self._single_src_sheet_combo = QComboBox()
        file_layout.addRow("Feuille source (single):", self._single_src_sheet_combo)
        self._single_tgt_sheet_combo = QComboBox()
        file_layout.addRow("Feuille cible (single):", self._single_tgt_sheet_combo)

        file_group.setLayout(file_layout)
        layout.addWidget(file_group)

        self._load_btn = QPushButton("Charger les feuilles")
        self._load_btn.clicked.connect(self._load_sheets)
        layout.addWidget(self._load_btn)

        # Colonnes
        col_group = QGroupBox("Colonnes")
        col_layout = QHBoxLayout()
        self._source_label = QLabel("Source: —")
        self._target_label = QLabel("Cible: —")
        self._source_column_combo = QComboBox()
        self._target_column_combo = QComboBox()
        self._source_extra_list = self._extra_list()
        self._target_extra_list = self._extra_list()
        for label, combo, extra in (
            (self._source_label, self._source_column_combo, self._source_extra_list),
            (self._target_label, self._target_column_combo, self._target_extra_list),
        ):
            side = QVBoxLayout()
            side.addWidget(label)
            side.addWidget(QLabel("Colonne à apparier:"))
            side.addWidget(combo)
            side.addWidget(QLabel("Colonnes additionnelles (export):"))
            side.addWidget(extra)
            col_layout.addLayout(side)
        col_group.setLayout(col_layout)
        layout.addWidget(col_group)

        # Paramètres
        params_group = QGroupBox("Paramètres")
        params_layout = QFormLayout()
        self._algorithm_combo = QComboBox()
        fill_algorithm_combo(self._algorithm_combo, self._state.algorithm)
        self._algorithm_combo.currentIndexChanged.connect(self._on_algorithm_changed)
        params_layout.addRow("Algorithme:", self._algorithm_combo)
        self._algorithm_help = QLabel("")
        self._algorithm_help.setWordWrap(True)
        params_layout.addRow("", self._algorithm_help)
        self._on_algorithm_changed()

        self._threshold_spin = QDoubleSpinBox()
        self._threshold_spin.setRange(0.0, 1.0)
        self._threshold_spin.setSingleStep(0.05)
        self._threshold_spin.setDecimals(2)
        self._threshold_spin.setValue(self._state.threshold)
        self._threshold_spin.setToolTip("Score minimal (inclus) pour accepter une paire.")
        params_layout.addRow("Seuil:", self._threshold_spin)

        self._max_results_spin = QSpinBox()
        self._max_results_spin.setRange(0, 1_000_000)
        self._max_results_spin.setValue(self._state.max_results)
        params_layout.addRow("Nombre max de paires:", self._max_results_spin)

        self._simple_cb = QCheckBox("Format de sortie simple")
        self._simple_cb.setChecked(self._state.simple_mode)
        params_layout.addRow("", self._simple_cb)
        self._unmatched_cb = QCheckBox("Exporter les non-appariés")
        self._unmatched_cb.setChecked(self._state.export_unmatched)
        params_layout.addRow("", self._unmatched_cb)
        params_group.setLayout(params_layout)
        layout.addWidget(params_group)

        self._run_btn = QPushButton("Lancer")
        self._run_btn.setEnabled(False)
        self._run_btn.clicked.connect(self._on_run_clicked)
        layout.addWidget(self._run_btn)
        layout.addStretch()

        self._on_single_file_toggled(False)

    def _file_row(self, form: QFormLayout, label: str, which: str) -> tuple[QLineEdit, QPushButton]:
        edit = QLineEdit()
        edit.setPlaceholderText("Chemin du fichier tableur...")
        browse = QPushButton("Parcourir")
        browse.clicked.connect(lambda: self._browse_file(which))
        row = QHBoxLayout()
        row.addWidget(edit)
        row.addWidget(browse)
        form.addRow(label, row)
        return edit, browse

    @staticmethod
    def _header_spin(value: int) -> QSpinBox:
        spin = QSpinBox()
        spin.setRange(1, 10000)
        spin.setValue(value)
        spin.setToolTip("Numéro de ligne (1 = première) contenant les en-têtes.")
        return spin

    @staticmethod
    def _extra_list() -> QListWidget:
        lst = QListWidget()
        lst.setSelectionMode(QAbstractItemView.SelectionMode.MultiSelection)
        lst.setMaximumHeight(120)
        return lst

    def _on_single_file_toggled(self, checked: bool) -> None:
        for w in (
            self._source_file_edit,
            self._source_browse,
            self._source_sheet_combo,
            self._target_file_edit,
            self._target_browse,
            self._target_sheet_combo,
        ):
            w.setEnabled(not checked)
        for w in (
            self._single_file_edit,
            self._single_browse,
            self._single_src_sheet_combo,
            self._single_tgt_sheet_combo,
        ):
            w.setEnabled(checked)

    def _on_algorithm_changed(self) -> None:
        tooltip = self._algorithm_combo.currentData(Qt.ItemDataRole.ToolTipRole)
        self._algorithm_help.setText(tooltip or "")

    def _browse_file(self, which: str) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Sélectionner fichier tableur", "", SUPPORTED_INPUT_FILTER)
        if not path:
            return
        if which == "source":
            self._source_file_edit.setText(path)
            self._update_sheet_combo(self._source_sheet_combo, path)
        elif which == "target":
            self._target_file_edit.setText(path)
            self._update_sheet_combo(self._target_sheet_combo, path)
        else:
            self._single_file_edit.setText(path)
            sheets = self._update_sheet_combo(self._single_src_sheet_combo, path)
            self._single_tgt_sheet_combo.clear()
            self._single_tgt_sheet_combo.addItems(sheets)

    def _update_sheet_combo(self, combo: QComboBox, path: str) -> list[str]:
        combo.clear()
        try:
            sheets = list_sheets(path)
        except Exception as e:
            QMessageBox.critical(self, "Erreur", f"Impossible de lire les feuilles: {e}")
            return []
        combo.addItems(sheets)
        return sheets

    def _load_sheets(self) -> None:
        src_header = self._source_header_spin.value()
        tgt_header = self._target_header_spin.value()
        try:
            if self._single_file_cb.isChecked():
                path = self._single_file_edit.text().strip()
                if not path:
                    QMessageBox.warning(self, "Attention", "Sélectionnez un fichier.")
                    return
                src_sheet = self._single_src_sheet_combo.currentText() or None
                tgt_sheet = self._single_tgt_sheet_combo.currentText() or None
                df_src = load_sheet(path, src_sheet, header_row=src_header)
                df_tgt = load_sheet(path, tgt_sheet, header_row=tgt_header)
                self._state.single_file = path
                self._state.source_sheet_in_single = src_sheet
                self._state.target_sheet_in_single = tgt_sheet
                self._state.source_file = ""
                self._state.target_file = ""
            else:
                src_path = self._source_file_edit.text().strip()
                tgt_path = self._target_file_edit.text().strip()
                if not src_path or not tgt_path:
                    QMessageBox.warning(self, "Attention", "Sélectionnez les deux fichiers.")
                    return
                src_sheet = self._source_sheet_combo.currentText() or None
                tgt_sheet = self._target_sheet_combo.currentText() or None
                df_src = load_sheet(src_path, src_sheet, header_row=src_header)
                df_tgt = load_sheet(tgt_path, tgt_sheet, header_row=tgt_header)
                self._state.source_file = src_path
                self._state.target_file = tgt_path
                self._state.source_sheet = src_sheet
                self._state.target_sheet = tgt_sheet
                self._state.single_file = ""
        except Exception as e:
            QMessageBox.critical(self, "Erreur", str(e))
            return

        self._state.source_header_row = src_header
        self._state.target_header_row = tgt_header
        self._state.df_source = df_src
        self._state.df_target = df_tgt
        self._state.result = None
        self._fill_columns(self._source_column_combo, self._source_extra_list, list_columns(df_src))
        self._fill_columns(self._target_column_combo, self._target_extra_list, list_columns(df_tgt))
        self._source_label.setText(f"Source: {df_src.shape[0]} lignes × {df_src.shape[1]} colonnes")
        self._target_label.setText(f"Cible: {df_tgt.shape[0]} lignes × {df_tgt.shape[1]} colonnes")
        self._run_btn.setEnabled(True)

    @staticmethod
    def _fill_columns(combo: QComboBox, extra: QListWidget, columns: list[str]) -> None:
        combo.clear()
        combo.addItems(columns)
        extra.clear()
        extra.addItems(columns)

    def _sync_state(self) -> bool:
        """Reporte les choix de l'écran dans l'état ; False si une colonne manque."""
        source_column = self._source_column_combo.currentText()
        target_column = self._target_column_combo.currentText()
        if not source_column or not target_column:
            QMessageBox.warning(self, "Attention", "Choisissez une colonne source et une colonne cible.")
            return False
        self._state.source_column = source_column
        self._state.target_column = target_column
        self._state.additional_source_columns = [i.text() for i in self._source_extra_list.selectedItems()]
        self._state.additional_target_columns = [i.text() for i in self._target_extra_list.selectedItems()]
        self._state.algorithm = self._algorithm_combo.currentData() or DEFAULT_ALGORITHM
        self._state.threshold = self._threshold_spin.value()
        self._state.max_results = self._max_results_spin.value()
        self._state.simple_mode = self._simple_cb.isChecked()
        self._state.export_unmatched = self._unmatched_cb.isChecked()
        return True

    def _on_run_clicked(self) -> None:
        if self._sync_state():
            self._on_matching_requested()
