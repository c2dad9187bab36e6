"""Schémas et types pour le matching."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class StringItem:
    """Une valeur non vide et sa position dans la séquence d'origine."""

    value: str
    row_index: int


@dataclass(frozen=True)
class MatchRecord:
    """Une paire source/cible acceptée."""

    source: str
    target: str
    score: float
    algorithm: str
    source_row: int
    target_row: int

    def __repr__(self) -> str:
        return f"MatchRecord({self.source!r} -> {self.target!r}, score={self.score:.3f})"


@dataclass(frozen=True)
class ScoringFailure:
    """Échec d'un algorithme sur une paire (paire ignorée, boucle poursuivie)."""

    source_row: int
    target_row: int
    algorithm: str
    error: str


@dataclass(frozen=True)
class AlgorithmInfo:
    """Métadonnées statiques d'un algorithme de similarité."""

    id: str
    name: str
    description: str
    best_for: str = ""
    strength: str = ""
    category: str = "basic"  # basic, advanced, search-engine
    performance: str = "fast"  # fast, medium, slow


@dataclass
class MatchingOutcome:
    """Partition complète des deux séquences : paires + restes de chaque côté."""

    matches: list[MatchRecord] = field(default_factory=list)
    unmatched_sources: list[StringItem] = field(default_factory=list)
    unmatched_targets: list[StringItem] = field(default_factory=list)
    algorithm: str = ""
    requested_algorithm: str = ""
    threshold: float = 0.0
    warnings: list[str] = field(default_factory=list)
    failures: list[ScoringFailure] = field(default_factory=list)

    @property
    def total_sources(self) -> int:
        return len(self.matches) + len(self.unmatched_sources)

    @property
    def total_targets(self) -> int:
        return len(self.matches) + len(self.unmatched_targets)


@dataclass(frozen=True)
class MatchEvent:
    """Événement émis par le linker vers le hook d'observation."""

    kind: str  # started, fallback, matched, unmatched, scoring_failure, exhausted, capped, completed
    source: StringItem | None = None
    target: StringItem | None = None
    score: float | None = None
    message: str = ""


@dataclass(frozen=True)
class SearchHit:
    """Résultat d'une recherche simple dans une liste de valeurs."""

    value: str
    score: float
    index: int
