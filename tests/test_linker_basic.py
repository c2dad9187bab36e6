"""Tests de base du linker."""

import logging
import math
from collections.abc import Iterator

import pytest

from fuzzypair.config import Config, InvalidInputError
from fuzzypair.matching.linker import Linker, match, prepare_items
from fuzzypair.matching.registry import register_algorithm, unregister_algorithm
from fuzzypair.matching.schema import AlgorithmInfo, MatchEvent, StringItem
from fuzzypair.matching.scorers import levenshtein_similarity


@pytest.fixture
def flaky_algorithm() -> Iterator[str]:
    """Algorithme qui échoue sur certaines cibles (exception, NaN, non numérique)."""

    def flaky(a: str, b: str) -> float:
        if b == "boom" and a != "boom":
            raise RuntimeError("boom")
        if b == "nan":
            return float("nan")
        if b == "text":
            return "0.9"  # type: ignore[return-value]
        return levenshtein_similarity(a, b)

    register_algorithm(AlgorithmInfo("flaky", "Flaky", "Échoue sur demande"), flaky)
    yield "flaky"
    unregister_algorithm("flaky")


@pytest.fixture
def constant_algorithm() -> Iterator[str]:
    register_algorithm(AlgorithmInfo("half", "Half", "Toujours 0.5"), lambda a, b: 0.5)
    yield "half"
    unregister_algorithm("half")


def test_prepare_items_keeps_original_index() -> None:
    items = prepare_items(["", "  Smith ", None, float("nan"), "Jones"])
    assert items == [StringItem("Smith", 1), StringItem("Jones", 4)]


def test_jaro_winkler_names_and_companies() -> None:
    outcome = match(
        ["John Smith", "Microsoft Corp"],
        ["J. Smith", "Microsoft Corporation"],
        algorithm="jaro-winkler",
        threshold=0.6,
    )
    assert [(m.source, m.target) for m in outcome.matches] == [
        ("John Smith", "J. Smith"),
        ("Microsoft Corp", "Microsoft Corporation"),
    ]
    assert all(m.score >= 0.6 for m in outcome.matches)
    assert all(m.algorithm == "jaro-winkler" for m in outcome.matches)
    assert outcome.unmatched_sources == []
    assert outcome.unmatched_targets == []


def test_no_match_below_threshold() -> None:
    outcome = match(["Apple Inc"], ["Banana Co"], algorithm="levenshtein", threshold=0.6)
    assert outcome.matches == []
    assert outcome.unmatched_sources == [StringItem("Apple Inc", 0)]
    assert outcome.unmatched_targets == [StringItem("Banana Co", 0)]


def test_duplicate_targets_are_claimed_once() -> None:
    outcome = match(["Smith", "Smith"], ["Smith", "Smith"])
    assert len(outcome.matches) == 2
    assert [m.target_row for m in outcome.matches] == [0, 1]
    assert [m.source_row for m in outcome.matches] == [0, 1]


def test_ties_go_to_first_target() -> None:
    outcome = match(["abc"], ["abd", "abe"], threshold=0.5)
    assert outcome.matches[0].target_row == 0


def test_greedy_order_dependence() -> None:
    # La première source prend la cible même si la seconde y correspond exactement
    outcome = match(["abcd", "abce"], ["abce"], threshold=0.6)
    assert outcome.matches[0].source == "abcd"
    assert outcome.matches[0].target == "abce"
    assert outcome.unmatched_sources == [StringItem("abce", 1)]


def test_threshold_is_inclusive(constant_algorithm: str) -> None:
    outcome = match(["a"], ["b"], algorithm=constant_algorithm, threshold=0.5)
    assert len(outcome.matches) == 1
    outcome = match(["a"], ["b"], algorithm=constant_algorithm, threshold=0.51)
    assert outcome.matches == []


def test_partition_and_exclusivity() -> None:
    sources = ["Dupont", "", "Martin", "Bernard", "Durand", "Petit"]
    targets = ["Dupond", "Martine", "  ", "Bernardo", "Leroy"]
    outcome = match(sources, targets, threshold=0.5)

    matched_src = [m.source_row for m in outcome.matches]
    matched_tgt = [m.target_row for m in outcome.matches]
    assert len(set(matched_src)) == len(matched_src)
    assert len(set(matched_tgt)) == len(matched_tgt)
    all_src = sorted(matched_src + [s.row_index for s in outcome.unmatched_sources])
    all_tgt = sorted(matched_tgt + [t.row_index for t in outcome.unmatched_targets])
    assert all_src == [0, 2, 3, 4, 5]
    assert all_tgt == [0, 1, 3, 4]
    assert outcome.total_sources == 5
    assert outcome.total_targets == 4


def test_threshold_monotonicity() -> None:
    sources = ["Dupont", "Martin", "Bernard", "Durand", "Petit", "Moreau"]
    targets = ["Dupond", "Martine", "Bernardo", "Durant", "Leroy", "Morel"]
    counts = [len(match(sources, targets, threshold=t).matches) for t in (0.9, 0.7, 0.5, 0.3, 0.0)]
    assert counts == sorted(counts)


def test_max_results_caps_matches() -> None:
    outcome = match(["Smith"] * 5, ["Smith"] * 5, max_results=2)
    assert len(outcome.matches) == 2
    assert len(outcome.unmatched_sources) == 3
    assert len(outcome.unmatched_targets) == 3


def test_max_results_zero() -> None:
    events: list[MatchEvent] = []
    outcome = match(["Smith"], ["Smith"], max_results=0, on_event=events.append)
    assert outcome.matches == []
    assert "capped" in [e.kind for e in events]


def test_stops_when_targets_exhausted() -> None:
    events: list[MatchEvent] = []
    outcome = match(["Smith", "Smyth", "Smit"], ["Smith"], on_event=events.append)
    assert len(outcome.matches) == 1
    assert [s.row_index for s in outcome.unmatched_sources] == [1, 2]
    assert "exhausted" in [e.kind for e in events]


def test_blank_values_keep_row_numbers() -> None:
    outcome = match(["", "Smith"], [None, "", "Smith"])
    assert outcome.matches[0].source_row == 1
    assert outcome.matches[0].target_row == 2


@pytest.mark.parametrize(
    "sources,targets",
    [([], ["a"]), (["a"], []), (["", "  "], ["a"]), (["a"], [None, float("nan")])],
)
def test_empty_side_is_invalid(sources: list, targets: list) -> None:
    with pytest.raises(InvalidInputError):
        match(sources, targets)


@pytest.mark.parametrize("threshold", [-0.1, 1.01, math.nan])
def test_threshold_out_of_range(threshold: float) -> None:
    with pytest.raises(InvalidInputError, match="threshold"):
        Linker(threshold=threshold)


def test_negative_max_results() -> None:
    with pytest.raises(InvalidInputError, match="max_results"):
        Linker(max_results=-1)


def test_invalid_input_is_value_error() -> None:
    with pytest.raises(ValueError):
        match([], [])


def test_unknown_algorithm_falls_back(caplog: pytest.LogCaptureFixture) -> None:
    events: list[MatchEvent] = []
    with caplog.at_level(logging.WARNING):
        outcome = match(["Smith"], ["Smith"], algorithm="does-not-exist", on_event=events.append)
    assert outcome.algorithm == "levenshtein"
    assert outcome.requested_algorithm == "does-not-exist"
    assert len(outcome.warnings) == 1
    assert outcome.matches[0].algorithm == "levenshtein"
    assert events[0].kind == "fallback"
    assert "does-not-exist" in caplog.text


def test_scoring_failures_are_isolated(flaky_algorithm: str, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="fuzzypair.matching.linker"):
        outcome = match(["alpha"], ["boom", "nan", "text", "alpha"], algorithm=flaky_algorithm)
    assert len(outcome.matches) == 1
    assert outcome.matches[0].target_row == 3
    assert [f.target_row for f in outcome.failures] == [0, 1, 2]
    assert "RuntimeError" in outcome.failures[0].error
    assert all(f.source_row == 0 and f.algorithm == flaky_algorithm for f in outcome.failures)
    assert "boom" in caplog.text


def test_failed_pairs_stay_available(flaky_algorithm: str) -> None:
    # La cible en échec pour la première source reste libre pour la suivante
    outcome = match(["alpha", "boom"], ["boom"], algorithm=flaky_algorithm)
    assert len(outcome.failures) == 1
    assert [(m.source, m.target_row) for m in outcome.matches] == [("boom", 0)]
    assert outcome.unmatched_sources == [StringItem("alpha", 0)]
    assert outcome.unmatched_targets == []


def test_events_sequence() -> None:
    events: list[MatchEvent] = []
    match(["Smith", "Zzzz"], ["Smith", "Jones"], on_event=events.append)
    kinds = [e.kind for e in events]
    assert kinds == ["started", "matched", "unmatched", "completed"]
    matched = events[1]
    assert matched.source == StringItem("Smith", 0)
    assert matched.target == StringItem("Smith", 0)
    assert matched.score == 1.0


def test_failing_hook_is_ignored(caplog: pytest.LogCaptureFixture) -> None:
    def hook(event: MatchEvent) -> None:
        raise RuntimeError("hook cassé")

    with caplog.at_level(logging.ERROR, logger="fuzzypair.matching.linker"):
        outcome = match(["Smith"], ["Smith"], on_event=hook)
    assert len(outcome.matches) == 1
    assert "hook" in caplog.text.lower()


def test_debug_logging_per_item(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="fuzzypair.matching.linker"):
        match(["Smith", "Zzzz"], ["Smith"], threshold=0.9)
    messages = [r.getMessage() for r in caplog.records]
    assert any("Match 1" in m for m in messages)
    assert any("terminé" in m for m in messages)


def test_from_config() -> None:
    config = Config(
        source_file="a.xlsx",
        target_file="b.xlsx",
        source_column="nom",
        target_column="name",
        algorithm="soundex",
        threshold=0.75,
        max_results=10,
    )
    linker = Linker.from_config(config)
    assert linker.algorithm == "soundex"
    assert linker.threshold == 0.75
    assert linker.max_results == 10
    outcome = linker.run(["Robert"], ["Rupert"])
    assert outcome.matches[0].score == 1.0


def test_numeric_cells_are_stringified() -> None:
    outcome = match([12345, 3.5], ["12345", "3.5"])
    assert [(m.source, m.target) for m in outcome.matches] == [("12345", "12345"), ("3.5", "3.5")]
