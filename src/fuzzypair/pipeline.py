"""Pipeline complet : chargement des feuilles, extraction des colonnes, matching, export."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from fuzzypair.config import Config
from fuzzypair.export import write_results_workbook, write_unmatched_workbook
from fuzzypair.io_excel import extract_column, load_source_target
from fuzzypair.matching.linker import EventHook, Linker
from fuzzypair.matching.schema import MatchingOutcome
from fuzzypair.report import MatchingStats, compute_stats

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Données chargées et résultat du matching, prêts pour l'export ou l'affichage."""

    df_source: pd.DataFrame
    df_target: pd.DataFrame
    source_values: list[str]
    target_values: list[str]
    outcome: MatchingOutcome
    stats: MatchingStats


def run_pipeline(
    config: Config,
    on_event: EventHook | None = None,
    *,
    frames: tuple[pd.DataFrame, pd.DataFrame] | None = None,
) -> PipelineResult:
    """
    Charge les deux feuilles (sauf si frames est fourni), extrait les colonnes et lance le linker.

    Raises:
        ExcelFileError: Fichier, feuille ou colonne introuvable.
        InvalidInputError: Colonne vide après filtrage.
    """
    df_source, df_target = frames if frames is not None else load_source_target(config)
    source_values = extract_column(df_source, config.source_column)
    target_values = extract_column(df_target, config.target_column)
    logger.info(
        "Colonnes extraites : %s (%d lignes), %s (%d lignes)",
        config.source_column,
        len(source_values),
        config.target_column,
        len(target_values),
    )

    linker = Linker.from_config(config, on_event=on_event)
    outcome = linker.run(source_values, target_values)
    stats = compute_stats(outcome.matches, outcome.total_sources)
    return PipelineResult(df_source, df_target, source_values, target_values, outcome, stats)


def unmatched_paths(output_path: str | Path, unmatched_dir: str | Path | None = None) -> tuple[Path, Path]:
    """Chemins des classeurs de non-appariés : <stem>_unmatched_source.xlsx / _target.xlsx."""
    out = Path(output_path)
    base = Path(unmatched_dir) if unmatched_dir else out.parent
    return (
        base / f"{out.stem}_unmatched_source.xlsx",
        base / f"{out.stem}_unmatched_target.xlsx",
    )


def export_pipeline(
    result: PipelineResult,
    config: Config,
    output_path: str | Path,
    unmatched_dir: str | Path | None = None,
) -> list[Path]:
    """
    Écrit le classeur de résultats puis, si export_unmatched, un classeur par côté ayant des restes.

    Returns:
        Chemins écrits, dans l'ordre d'écriture.
    """
    outcome = result.outcome
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    written = [
        write_results_workbook(output_path, outcome, result.stats, config, result.df_source, result.df_target)
    ]
    if not config.export_unmatched:
        return written

    source_path, target_path = unmatched_paths(output_path, unmatched_dir)
    source_path.parent.mkdir(parents=True, exist_ok=True)
    if outcome.unmatched_sources:
        written.append(
            write_unmatched_workbook(
                source_path,
                outcome.unmatched_sources,
                config.source_name,
                config.source_column,
                result.df_source,
                config.additional_source_columns,
            )
        )
    if outcome.unmatched_targets:
        written.append(
            write_unmatched_workbook(
                target_path,
                outcome.unmatched_targets,
                config.target_name,
                config.target_column,
                result.df_target,
                config.additional_target_columns,
            )
        )
    return written
