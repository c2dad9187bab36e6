"""Module de matching : algorithmes de similarité, registre et linker."""

from fuzzypair.matching.linker import Linker, match, prepare_items, search
from fuzzypair.matching.registry import (
    algorithm_ids,
    get_algorithm_info,
    list_algorithms,
    register_algorithm,
    resolve_algorithm,
)
from fuzzypair.matching.schema import (
    AlgorithmInfo,
    MatchEvent,
    MatchingOutcome,
    MatchRecord,
    ScoringFailure,
    SearchHit,
    StringItem,
)

__all__ = [
    "AlgorithmInfo",
    "Linker",
    "MatchEvent",
    "MatchRecord",
    "MatchingOutcome",
    "ScoringFailure",
    "SearchHit",
    "StringItem",
    "algorithm_ids",
    "get_algorithm_info",
    "list_algorithms",
    "match",
    "prepare_items",
    "register_algorithm",
    "resolve_algorithm",
    "search",
]
