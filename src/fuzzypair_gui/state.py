"""État global de l'application GUI."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from fuzzypair.config import DEFAULT_ALGORITHM, DEFAULT_MAX_RESULTS, DEFAULT_THRESHOLD, Config
from fuzzypair.pipeline import PipelineResult


@dataclass
class AppState:
    """État central de l'application."""

    # Fichiers et feuilles
    source_file: str = ""
    target_file: str = ""
    single_file: str = ""
    source_sheet: str | None = None
    target_sheet: str | None = None
    source_sheet_in_single: str | None = None
    target_sheet_in_single: str | None = None
    source_header_row: int = 1
    target_header_row: int = 1

    # Feuilles chargées (complètes : le matching les réutilise)
    df_source: pd.DataFrame | None = None
    df_target: pd.DataFrame | None = None

    # Colonnes et paramètres choisis
    source_column: str = ""
    target_column: str = ""
    additional_source_columns: list[str] = field(default_factory=list)
    additional_target_columns: list[str] = field(default_factory=list)
    algorithm: str = DEFAULT_ALGORITHM
    threshold: float = DEFAULT_THRESHOLD
    max_results: int = DEFAULT_MAX_RESULTS
    simple_mode: bool = False
    export_unmatched: bool = True

    # Résultat du dernier matching
    result: PipelineResult | None = None
    config: Config | None = None

    def build_config_dict(self) -> dict[str, Any]:
        """Construit le dict de configuration (validé ensuite par Config.from_dict)."""
        d: dict[str, Any] = {}
        if self.single_file:
            d["single_file"] = self.single_file
            d["source_sheet_in_single"] = self.source_sheet_in_single
            d["target_sheet_in_single"] = self.target_sheet_in_single
        else:
            d["source_file"] = self.source_file
            d["target_file"] = self.target_file
            d["source_sheet"] = self.source_sheet
            d["target_sheet"] = self.target_sheet
        d.update(
            {
                "source_header_row": self.source_header_row,
                "target_header_row": self.target_header_row,
                "source_column": self.source_column,
                "target_column": self.target_column,
                "additional_source_columns": list(self.additional_source_columns),
                "additional_target_columns": list(self.additional_target_columns),
                "algorithm": self.algorithm,
                "threshold": self.threshold,
                "max_results": self.max_results,
                "simple_mode": self.simple_mode,
                "export_unmatched": self.export_unmatched,
            }
        )
        return d

    @property
    def frames(self) -> tuple[pd.DataFrame, pd.DataFrame] | None:
        """Feuilles déjà chargées, ou None s'il faut les relire."""
        if self.df_source is None or self.df_target is None:
            return None
        return self.df_source, self.df_target
