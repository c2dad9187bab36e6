"""Écriture des classeurs de résultats, des non-appariés et du mapping CSV."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from fuzzypair.config import Config
from fuzzypair.io_excel import save_xlsx
from fuzzypair.matching.schema import MatchingOutcome, StringItem
from fuzzypair.report import (
    MatchingStats,
    build_detailed_df,
    build_report_df,
    build_simple_df,
    build_statistics_df,
    build_unmatched_df,
    build_unmatched_summary_df,
)

logger = logging.getLogger(__name__)

RESULTS_SHEET = "Fuzzy Match Results"
SIMPLE_SHEET = "Matches"
STATISTICS_SHEET = "Statistics"
SUMMARY_SHEET = "Summary"
REPORT_SHEET = "REPORT"


def write_results_workbook(
    output_path: str | Path,
    outcome: MatchingOutcome,
    stats: MatchingStats,
    config: Config,
    df_source: pd.DataFrame | None = None,
    df_target: pd.DataFrame | None = None,
) -> Path:
    """
    Écrit le classeur de résultats.

    Mode simple : un seul onglet "Matches". Mode détaillé : résultats,
    Statistics et REPORT.
    """
    path = Path(output_path)
    if config.simple_mode:
        sheets = {SIMPLE_SHEET: build_simple_df(outcome.matches, config, df_source, df_target)}
    else:
        sheets = {
            RESULTS_SHEET: build_detailed_df(outcome.matches, config, df_source, df_target),
            STATISTICS_SHEET: build_statistics_df(stats),
            REPORT_SHEET: build_report_df(outcome, stats, config),
        }
    save_xlsx(path, sheets)
    logger.info("Résultats écrits: %s (%d matches)", path, len(outcome.matches))
    return path


def write_unmatched_workbook(
    output_path: str | Path,
    items: list[StringItem],
    file_name: str,
    column: str,
    df: pd.DataFrame | None = None,
    additional_columns: list[str] | None = None,
) -> Path:
    """Écrit les éléments non appariés d'un côté (onglet "Unmatched <fichier>" + Summary)."""
    path = Path(output_path)
    sheets = {
        f"Unmatched {file_name}": build_unmatched_df(items, column, df, additional_columns or []),
        SUMMARY_SHEET: build_unmatched_summary_df(file_name, column, len(items)),
    }
    save_xlsx(path, sheets)
    logger.info("Non appariés écrits: %s (%d éléments)", path, len(items))
    return path


def build_mapping_csv(outcome: MatchingOutcome, output_path: str | Path) -> None:
    """
    Génère un mapping CSV : une ligne par élément source (apparié ou non).

    Colonnes : source_row, target_row, score, status (matched / unmatched),
    lignes en numérotation tableur (1-based).
    """
    rows = [
        {
            "source_row": m.source_row + 1,
            "target_row": m.target_row + 1,
            "score": round(m.score, 6),
            "status": "matched",
        }
        for m in outcome.matches
    ]
    rows.extend(
        {"source_row": item.row_index + 1, "target_row": "", "score": "", "status": "unmatched"}
        for item in outcome.unmatched_sources
    )
    rows.sort(key=lambda r: r["source_row"])
    df = pd.DataFrame(rows, columns=["source_row", "target_row", "score", "status"])
    df.to_csv(output_path, index=False, encoding="utf-8")
