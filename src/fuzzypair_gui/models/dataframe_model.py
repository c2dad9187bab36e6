"""QAbstractTableModel pour afficher un pandas DataFrame."""

from __future__ import annotations

import pandas as pd
from PySide6.QtCore import QAbstractTableModel, QModelIndex, QObject, Qt

# Au-delà, le texte complet passe en infobulle
MAX_CELL_CHARS = 120


class DataFrameModel(QAbstractTableModel):
    """Modèle Qt en lecture seule : cellules vides pour NaN, nombres alignés à droite."""

    def __init__(self, df: pd.DataFrame | None = None, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._df = df if df is not None else pd.DataFrame()

    def set_dataframe(self, df: pd.DataFrame | None) -> None:
        """Remplace le DataFrame (None = vide) et notifie la vue."""
        self.beginResetModel()
        self._df = df if df is not None else pd.DataFrame()
        self.endResetModel()

    def dataframe(self) -> pd.DataFrame:
        return self._df

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return 0 if parent.isValid() else len(self._df)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return 0 if parent.isValid() else len(self._df.columns)

    def _text(self, row: int, col: int) -> str | None:
        if not (0 <= row < len(self._df) and 0 <= col < len(self._df.columns)):
            return None
        val = self._df.iat[row, col]
        if pd.isna(val):
            return ""
        return str(val)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> object:
        if not index.isValid():
            return None
        text = self._text(index.row(), index.column())
        if text is None:
            return None
        if role == Qt.ItemDataRole.DisplayRole:
            return text if len(text) <= MAX_CELL_CHARS else text[: MAX_CELL_CHARS - 1] + "…"
        if role == Qt.ItemDataRole.ToolTipRole and len(text) > MAX_CELL_CHARS:
            return text
        if role == Qt.ItemDataRole.TextAlignmentRole and pd.api.types.is_numeric_dtype(
            self._df.dtypes.iloc[index.column()]
        ):
            return int(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
        return None

    def headerData(
        self, section: int, orientation: Qt.Orientation, role: int = Qt.ItemDataRole.DisplayRole
    ) -> str | None:
        if role != Qt.ItemDataRole.DisplayRole:
            return None
        if orientation == Qt.Orientation.Horizontal:
            return str(self._df.columns[section]) if section < len(self._df.columns) else None
        return str(section + 1)
