"""Tests du module report."""

import pandas as pd
import pytest

from fuzzypair.config import Config
from fuzzypair.matching.schema import MatchingOutcome, MatchRecord, StringItem
from fuzzypair.report import (
    build_detailed_df,
    build_report_df,
    build_simple_df,
    build_statistics_df,
    build_unmatched_df,
    build_unmatched_summary_df,
    compute_stats,
    format_percent,
    print_report_console,
    score_band,
)


def _record(source: str, target: str, score: float, src_row: int, tgt_row: int) -> MatchRecord:
    return MatchRecord(source, target, score, "levenshtein", src_row, tgt_row)


@pytest.fixture
def sample_config() -> Config:
    return Config(
        source_file="/data/clients.xlsx",
        target_file="/data/fournisseurs.xlsx",
        source_column="nom",
        target_column="name",
        additional_source_columns=["ville"],
        additional_target_columns=["code"],
    )


@pytest.fixture
def sample_outcome() -> MatchingOutcome:
    return MatchingOutcome(
        matches=[
            _record("John Smith", "J. Smith", 0.95, 0, 0),
            _record("Microsoft Corp", "Microsoft Corporation", 0.75, 1, 1),
        ],
        unmatched_sources=[StringItem("Apple Inc", 3)],
        unmatched_targets=[StringItem("Banana Co", 2)],
        algorithm="levenshtein",
        requested_algorithm="levenshtein",
        threshold=0.6,
    )


@pytest.mark.parametrize(
    "score,band",
    [(1.0, "excellent"), (0.9, "excellent"), (0.89, "good"), (0.7, "good"), (0.5, "fair"), (0.49, "poor"), (0.0, "poor")],
)
def test_score_band(score: float, band: str) -> None:
    assert score_band(score) == band


def test_compute_stats(sample_outcome: MatchingOutcome) -> None:
    stats = compute_stats(sample_outcome.matches, sample_outcome.total_sources)
    assert stats.total_source_items == 3
    assert stats.total_matches == 2
    assert stats.match_percentage == 66.67
    assert stats.average_score == 85.0
    assert stats.score_distribution == {"excellent": 1, "good": 1, "fair": 0, "poor": 0}


def test_compute_stats_no_match() -> None:
    stats = compute_stats([], 4)
    assert stats.total_source_items == 4
    assert stats.match_percentage == 0.0
    assert stats.average_score == 0.0
    assert sum(stats.score_distribution.values()) == 0


def test_format_percent() -> None:
    assert format_percent(0.8725) == "87.25%"
    assert format_percent(0.8725, 0) == "87%"


def test_build_detailed_df(
    sample_outcome: MatchingOutcome,
    sample_config: Config,
    people_source: pd.DataFrame,
    people_target: pd.DataFrame,
) -> None:
    df = build_detailed_df(sample_outcome.matches, sample_config, people_source, people_target)
    assert list(df.columns) == [
        "clients.xlsx - nom",
        "fournisseurs.xlsx - name",
        "Match Score",
        "Source Row",
        "Target Row",
        "clients.xlsx - ville",
        "fournisseurs.xlsx - code",
    ]
    first = df.iloc[0]
    assert first["Match Score"] == "95.00%"
    assert first["Source Row"] == 1
    assert first["clients.xlsx - ville"] == "Paris"
    assert df.iloc[1]["fournisseurs.xlsx - code"] == "B2"


def test_build_detailed_df_without_frames(sample_outcome: MatchingOutcome, sample_config: Config) -> None:
    """Sans DataFrame d'origine, les colonnes additionnelles sont omises."""
    df = build_detailed_df(sample_outcome.matches, sample_config)
    assert "clients.xlsx - ville" not in df.columns
    assert len(df) == 2


def test_build_simple_df(
    sample_outcome: MatchingOutcome,
    sample_config: Config,
    people_source: pd.DataFrame,
    people_target: pd.DataFrame,
) -> None:
    df = build_simple_df(sample_outcome.matches, sample_config, people_source, people_target)
    assert list(df.columns) == ["nom", "name", "match_score", "ville (File1)", "code (File2)"]
    assert df.iloc[1]["match_score"] == "75%"


def test_build_simple_df_same_column_name() -> None:
    config = Config(source_file="a.xlsx", target_file="b.xlsx", source_column="nom", target_column="nom")
    df = build_simple_df([_record("a", "a", 1.0, 0, 0)], config)
    assert list(df.columns) == ["nom (File1)", "nom (File2)", "match_score"]


def test_build_statistics_df(sample_outcome: MatchingOutcome) -> None:
    stats = compute_stats(sample_outcome.matches, sample_outcome.total_sources)
    df = build_statistics_df(stats)
    assert len(df) == 1
    row = df.iloc[0]
    assert row["Total Matches Found"] == 2
    assert row["Match Percentage"] == "66.67%"
    assert row["Excellent Matches (90%+)"] == 1
    assert row["Poor Matches (<50%)"] == 0


def test_build_unmatched_df(sample_outcome: MatchingOutcome, people_source: pd.DataFrame) -> None:
    df = build_unmatched_df(sample_outcome.unmatched_sources, "nom", people_source, ["ville"])
    assert list(df.columns) == ["nom (Unmatched)", "Original Row", "ville"]
    assert df.iloc[0].tolist() == ["Apple Inc", 4, "Lille"]


def test_build_unmatched_summary_df() -> None:
    df = build_unmatched_summary_df("clients.xlsx", "nom", 3)
    assert df.iloc[0]["Total Unmatched Items"] == 3
    assert df.iloc[0]["File"] == "clients.xlsx"


def test_build_report_df_counts(sample_outcome: MatchingOutcome, sample_config: Config) -> None:
    stats = compute_stats(sample_outcome.matches, sample_outcome.total_sources)
    df = build_report_df(sample_outcome, stats, sample_config)
    values = dict(zip(df["Key"], df["Value"]))
    assert values["nb_source_items"] == 3
    assert values["nb_target_items"] == 3
    assert values["nb_matches"] == 2
    assert values["nb_unmatched_source"] == 1
    assert values["nb_unmatched_target"] == 1
    assert values["algorithm"].startswith("levenshtein")
    assert "version" in values
    assert "timestamp" in values


def test_build_report_df_warnings(sample_outcome: MatchingOutcome, sample_config: Config) -> None:
    sample_outcome.warnings.append("Algorithme inconnu 'x', repli sur levenshtein")
    stats = compute_stats(sample_outcome.matches, sample_outcome.total_sources)
    df = build_report_df(sample_outcome, stats, sample_config)
    assert "warning_0" in df["Key"].tolist()


def test_print_report_console(sample_outcome: MatchingOutcome, capsys: pytest.CaptureFixture[str]) -> None:
    stats = compute_stats(sample_outcome.matches, sample_outcome.total_sources)
    print_report_console(sample_outcome, stats)
    out = capsys.readouterr().out
    assert "=== FuzzyPair Report ===" in out
    assert "66.67%" in out
    assert "levenshtein" in out


def test_build_detailed_df_same_file_name_keeps_both_values() -> None:
    """Deux fichiers de même nom et même colonne : la valeur source n'est pas écrasée."""
    config = Config(
        source_file="/data/2023/clients.xlsx",
        target_file="/data/2024/clients.xlsx",
        source_column="Nom",
        target_column="Nom",
    )
    df = build_detailed_df([_record("Dupont", "Dupond", 0.8333, 0, 0)], config)
    assert list(df.columns)[:2] == ["clients.xlsx (File1) - Nom", "clients.xlsx (File2) - Nom"]
    assert df.columns.is_unique
    assert df.iloc[0].tolist()[:2] == ["Dupont", "Dupond"]


def test_build_detailed_df_same_sheet_single_file(people_source: pd.DataFrame) -> None:
    config = Config(
        single_file="classeur.xlsx",
        source_sheet_in_single="Clients",
        target_sheet_in_single="Clients",
        source_column="nom",
        target_column="nom",
        additional_source_columns=["ville"],
        additional_target_columns=["ville"],
    )
    df = build_detailed_df(
        [_record("John Smith", "Microsoft Corp", 0.2, 0, 1)], config, people_source, people_source
    )
    assert df.columns.is_unique
    row = df.iloc[0]
    assert row["Clients (File1) - nom"] == "John Smith"
    assert row["Clients (File2) - nom"] == "Microsoft Corp"
    assert row["Clients (File1) - ville"] == "Paris"
    assert row["Clients (File2) - ville"] == "Lyon"
