"""Statistiques de matching, onglets de résultats et onglet REPORT."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Sequence

import pandas as pd

from fuzzypair import __version__
from fuzzypair.config import Config
from fuzzypair.matching.registry import get_algorithm_info
from fuzzypair.matching.schema import MatchingOutcome, MatchRecord, StringItem
from fuzzypair.normalize import safe_str

# Bornes basses des tranches de score, de la meilleure à la moins bonne
SCORE_BANDS = (("excellent", 0.9), ("good", 0.7), ("fair", 0.5), ("poor", 0.0))

BAND_LABELS = {
    "excellent": "Excellent Matches (90%+)",
    "good": "Good Matches (70-89%)",
    "fair": "Fair Matches (50-69%)",
    "poor": "Poor Matches (<50%)",
}

UNMATCHED_DESCRIPTION = "Éléments de ce fichier sans correspondance dans l'autre fichier"


@dataclass
class MatchingStats:
    """Statistiques agrégées d'un matching (pourcentages déjà arrondis à 2 décimales)."""

    total_source_items: int = 0
    total_matches: int = 0
    match_percentage: float = 0.0
    average_score: float = 0.0
    score_distribution: dict[str, int] = field(
        default_factory=lambda: {band: 0 for band, _ in SCORE_BANDS}
    )


def score_band(score: float) -> str:
    """Tranche d'un score : excellent (>= 0.9), good (>= 0.7), fair (>= 0.5), sinon poor."""
    for band, lower in SCORE_BANDS:
        if score >= lower:
            return band
    return "poor"


def compute_stats(matches: Sequence[MatchRecord], total_sources: int) -> MatchingStats:
    """Calcule les statistiques ; sans match (ou sans source) tout vaut zéro."""
    stats = MatchingStats(total_source_items=total_sources, total_matches=len(matches))
    if not matches:
        return stats
    if total_sources > 0:
        stats.match_percentage = round(len(matches) / total_sources * 100, 2)
    stats.average_score = round(sum(m.score for m in matches) / len(matches) * 100, 2)
    for m in matches:
        stats.score_distribution[score_band(m.score)] += 1
    return stats


def format_percent(score: float, decimals: int = 2) -> str:
    return f"{score * 100:.{decimals}f}%"


def _cell(df: pd.DataFrame | None, row_index: int, column: str) -> Any:
    """Valeur d'origine d'une cellule, ou None si la ligne ou la colonne n'existe pas."""
    if df is None or column not in df.columns or not 0 <= row_index < len(df):
        return None
    return safe_str(df.iloc[row_index][column])


def build_detailed_df(
    matches: Sequence[MatchRecord],
    config: Config,
    df_source: pd.DataFrame | None = None,
    df_target: pd.DataFrame | None = None,
) -> pd.DataFrame:
    """
    Onglet de résultats détaillé : une ligne par paire.

    Colonnes : "<source> - <colonne>", "<cible> - <colonne>", "Match Score"
    (xx.xx%), "Source Row" / "Target Row" (1-based), puis les colonnes
    additionnelles préfixées par le nom du fichier. Si source et cible portent
    le même nom (même fichier ou même feuille), les préfixes sont suffixés
    " (File1)" / " (File2)".
    """
    src_name, tgt_name = config.source_name, config.target_name
    if src_name == tgt_name:
        src_name, tgt_name = f"{src_name} (File1)", f"{tgt_name} (File2)"
    rows = []
    for m in matches:
        row: dict[str, Any] = {
            f"{src_name} - {config.source_column}": m.source,
            f"{tgt_name} - {config.target_column}": m.target,
            "Match Score": format_percent(m.score, 2),
            "Source Row": m.source_row + 1,
            "Target Row": m.target_row + 1,
        }
        for col in config.additional_source_columns:
            value = _cell(df_source, m.source_row, col)
            if value is not None:
                row[f"{src_name} - {col}"] = value
        for col in config.additional_target_columns:
            value = _cell(df_target, m.target_row, col)
            if value is not None:
                row[f"{tgt_name} - {col}"] = value
        rows.append(row)
    columns = [
        f"{src_name} - {config.source_column}",
        f"{tgt_name} - {config.target_column}",
        "Match Score",
        "Source Row",
        "Target Row",
    ]
    return pd.DataFrame(rows, columns=_with_extra_columns(columns, rows))


def build_simple_df(
    matches: Sequence[MatchRecord],
    config: Config,
    df_source: pd.DataFrame | None = None,
    df_target: pd.DataFrame | None = None,
) -> pd.DataFrame:
    """
    Onglet de résultats simple : colonne source, colonne cible, "match_score" (xx%).

    Les colonnes additionnelles sont suffixées " (File1)" / " (File2)". Si les
    deux colonnes appariées portent le même nom, elles sont suffixées de même.
    """
    col1, col2 = config.source_column, config.target_column
    if col1 == col2:
        col1, col2 = f"{col1} (File1)", f"{col2} (File2)"
    rows = []
    for m in matches:
        row: dict[str, Any] = {col1: m.source, col2: m.target, "match_score": format_percent(m.score, 0)}
        for col in config.additional_source_columns:
            value = _cell(df_source, m.source_row, col)
            if value is not None:
                row[f"{col} (File1)"] = value
        for col in config.additional_target_columns:
            value = _cell(df_target, m.target_row, col)
            if value is not None:
                row[f"{col} (File2)"] = value
        rows.append(row)
    return pd.DataFrame(rows, columns=_with_extra_columns([col1, col2, "match_score"], rows))


def _with_extra_columns(base: list[str], rows: list[dict[str, Any]]) -> list[str]:
    """Colonnes de base puis colonnes additionnelles dans l'ordre d'apparition."""
    columns = list(base)
    for row in rows:
        for key in row:
            if key not in columns:
                columns.append(key)
    return columns


def build_statistics_df(stats: MatchingStats) -> pd.DataFrame:
    """Onglet Statistics : une seule ligne."""
    row: dict[str, Any] = {
        "Total Source Items": stats.total_source_items,
        "Total Matches Found": stats.total_matches,
        "Match Percentage": f"{stats.match_percentage:.2f}%",
        "Average Match Score": f"{stats.average_score:.2f}%",
    }
    for band, _ in SCORE_BANDS:
        row[BAND_LABELS[band]] = stats.score_distribution.get(band, 0)
    return pd.DataFrame([row])


def build_unmatched_df(
    items: Sequence[StringItem],
    column: str,
    df: pd.DataFrame | None = None,
    additional_columns: Sequence[str] = (),
) -> pd.DataFrame:
    """Éléments non appariés d'un côté : "<colonne> (Unmatched)", "Original Row" (1-based), contexte."""
    rows = []
    for item in items:
        row: dict[str, Any] = {f"{column} (Unmatched)": item.value, "Original Row": item.row_index + 1}
        for col in additional_columns:
            value = _cell(df, item.row_index, col)
            if value is not None:
                row[col] = value
        rows.append(row)
    return pd.DataFrame(rows, columns=_with_extra_columns([f"{column} (Unmatched)", "Original Row"], rows))


def build_unmatched_summary_df(file_name: str, column: str, count: int) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "File": file_name,
                "Total Unmatched Items": count,
                "Column": column,
                "Description": UNMATCHED_DESCRIPTION,
            }
        ]
    )


def build_report_df(outcome: MatchingOutcome, stats: MatchingStats, config: Config) -> pd.DataFrame:
    """
    Construit le DataFrame pour l'onglet REPORT.

    Contient : compteurs, paramètres, avertissements, horodatage, version.
    """
    info = get_algorithm_info(outcome.algorithm)
    rows: list[tuple[str, Any]] = [
        ("nb_source_items", outcome.total_sources),
        ("nb_target_items", outcome.total_targets),
        ("nb_matches", len(outcome.matches)),
        ("nb_unmatched_source", len(outcome.unmatched_sources)),
        ("nb_unmatched_target", len(outcome.unmatched_targets)),
        ("nb_scoring_failures", len(outcome.failures)),
        ("match_percentage", f"{stats.match_percentage:.2f}%"),
        ("average_score", f"{stats.average_score:.2f}%"),
        ("", ""),
        ("Parameters", ""),
        ("source", f"{config.source_name} - {config.source_column}"),
        ("target", f"{config.target_name} - {config.target_column}"),
        ("algorithm", f"{outcome.algorithm} ({info.name})"),
        ("requested_algorithm", outcome.requested_algorithm),
        ("threshold", outcome.threshold),
        ("max_results", config.max_results),
        ("simple_mode", config.simple_mode),
    ]
    if outcome.warnings:
        rows.append(("", ""))
        rows.append(("Warnings", ""))
        rows.extend((f"warning_{i}", w) for i, w in enumerate(outcome.warnings))
    rows.extend(
        [
            ("", ""),
            ("timestamp", datetime.now().isoformat()),
            ("version", __version__),
        ]
    )
    return pd.DataFrame(rows, columns=["Key", "Value"])


def print_report_console(outcome: MatchingOutcome, stats: MatchingStats) -> None:
    """Affiche un résumé du rapport en console."""
    print("\n=== FuzzyPair Report ===")
    print(f"  Algorithme:        {outcome.algorithm} (seuil {outcome.threshold:.2f})")
    print(f"  Éléments source:   {outcome.total_sources}")
    print(f"  Éléments cible:    {outcome.total_targets}")
    print(f"  Matches:           {stats.total_matches} ({stats.match_percentage:.2f}%)")
    print(f"  Score moyen:       {stats.average_score:.2f}%")
    for band, _ in SCORE_BANDS:
        print(f"    {band:<10}       {stats.score_distribution.get(band, 0)}")
    print(f"  Source sans match: {len(outcome.unmatched_sources)}")
    print(f"  Cible sans match:  {len(outcome.unmatched_targets)}")
    if outcome.failures:
        print(f"  Échecs de score:   {len(outcome.failures)}")
    for w in outcome.warnings:
        print(f"  Avertissement:     {w}")
    print(f"  Version:           {__version__}")
    print(f"  Timestamp:         {datetime.now().isoformat()}")
    print("========================\n")
