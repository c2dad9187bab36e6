"""Moteur de linkage : appariement glouton un-pour-un entre deux colonnes."""

from __future__ import annotations

import logging
import math
import numbers
from typing import Any, Callable, Iterable

from fuzzypair.config import (
    DEFAULT_ALGORITHM,
    DEFAULT_MAX_RESULTS,
    DEFAULT_THRESHOLD,
    Config,
    InvalidInputError,
)
from fuzzypair.matching.registry import resolve_algorithm
from fuzzypair.matching.schema import (
    MatchEvent,
    MatchingOutcome,
    MatchRecord,
    ScoringFailure,
    SearchHit,
    StringItem,
)
from fuzzypair.normalize import clean_cell, is_blank

logger = logging.getLogger(__name__)

EventHook = Callable[[MatchEvent], None]


def prepare_items(values: Iterable[Any]) -> list[StringItem]:
    """
    Convertit une séquence brute en StringItem en écartant les valeurs vides.

    row_index reste la position dans la séquence d'origine (et non dans la
    séquence filtrée) : c'est ce qui permet de retrouver la ligne du tableur.
    """
    return [StringItem(clean_cell(v), i) for i, v in enumerate(values) if not is_blank(v)]


class Linker:
    """
    Moteur de linkage entre une colonne source et une colonne cible.

    Politique gloutonne et dépendante de l'ordre : chaque source, dans l'ordre
    d'origine, prend la meilleure cible encore libre. Une source traitée tôt
    peut donc prendre une cible qui aurait mieux convenu à une source plus
    tardive ; ce n'est pas une affectation optimale.
    """

    def __init__(
        self,
        algorithm: str = DEFAULT_ALGORITHM,
        threshold: float = DEFAULT_THRESHOLD,
        max_results: int = DEFAULT_MAX_RESULTS,
        on_event: EventHook | None = None,
    ) -> None:
        if not 0 <= threshold <= 1:
            raise InvalidInputError(f"threshold doit être entre 0 et 1 (got {threshold})")
        if max_results < 0:
            raise InvalidInputError(f"max_results doit être >= 0 (got {max_results})")
        self.requested_algorithm = algorithm
        self.algorithm, self.scorer, self.fallback_warning = resolve_algorithm(algorithm)
        self.threshold = threshold
        self.max_results = max_results
        self.on_event = on_event

    @classmethod
    def from_config(cls, config: Config, on_event: EventHook | None = None) -> Linker:
        return cls(
            algorithm=config.algorithm,
            threshold=config.threshold,
            max_results=config.max_results,
            on_event=on_event,
        )

    def run(self, source_strings: Iterable[Any], target_strings: Iterable[Any]) -> MatchingOutcome:
        """
        Exécute le matching.

        Returns:
            MatchingOutcome : paires dans l'ordre de découverte + sources et
            cibles restées libres.

        Raises:
            InvalidInputError: Si la source ou la cible est vide après filtrage.
        """
        sources = prepare_items(source_strings)
        targets = prepare_items(target_strings)
        if not sources or not targets:
            raise InvalidInputError(
                "Aucune donnée dans les colonnes choisies. "
                f"Source: {len(sources)} éléments, Cible: {len(targets)} éléments"
            )

        outcome = MatchingOutcome(
            algorithm=self.algorithm,
            requested_algorithm=self.requested_algorithm,
            threshold=self.threshold,
        )
        if self.fallback_warning:
            outcome.warnings.append(self.fallback_warning)
            self._emit(MatchEvent("fallback", message=self.fallback_warning))

        logger.info(
            "Matching %s : %d sources / %d cibles (seuil %.2f)",
            self.algorithm,
            len(sources),
            len(targets),
            self.threshold,
        )
        self._emit(MatchEvent("started", message=f"{len(sources)} sources, {len(targets)} cibles"))

        pool = list(targets)
        matched_rows: set[int] = set()

        for src in sources:
            if len(outcome.matches) >= self.max_results:
                self._emit(MatchEvent("capped", message=f"max_results={self.max_results} atteint"))
                logger.info("max_results=%d atteint, arrêt", self.max_results)
                break
            if not pool:
                self._emit(MatchEvent("exhausted", message="Plus aucune cible disponible"))
                logger.info("Plus aucune cible disponible, arrêt")
                break

            best, best_score = self._best_target(src, pool, outcome)
            if best is not None and best_score >= self.threshold:
                record = MatchRecord(
                    source=src.value,
                    target=best.value,
                    score=best_score,
                    algorithm=self.algorithm,
                    source_row=src.row_index,
                    target_row=best.row_index,
                )
                outcome.matches.append(record)
                matched_rows.add(src.row_index)
                pool.remove(best)
                logger.debug("Match %d: %r -> %r (%.0f%%)", len(outcome.matches), src.value, best.value, best_score * 100)
                self._emit(MatchEvent("matched", source=src, target=best, score=best_score))
            else:
                logger.debug("Pas de match pour %r (seuil %.0f%%)", src.value, self.threshold * 100)
                self._emit(MatchEvent("unmatched", source=src, target=best, score=best_score if best else None))

        outcome.unmatched_sources = [s for s in sources if s.row_index not in matched_rows]
        outcome.unmatched_targets = pool

        logger.info(
            "%s terminé : %d matches, %d sources et %d cibles non appariées, %d échecs de score",
            self.algorithm,
            len(outcome.matches),
            len(outcome.unmatched_sources),
            len(outcome.unmatched_targets),
            len(outcome.failures),
        )
        self._emit(MatchEvent("completed", message=f"{len(outcome.matches)} matches"))
        return outcome

    def _best_target(
        self,
        src: StringItem,
        pool: list[StringItem],
        outcome: MatchingOutcome,
    ) -> tuple[StringItem | None, float]:
        """Cible au score strictement le plus haut ; à égalité, la première dans l'ordre cible l'emporte."""
        best: StringItem | None = None
        best_score = 0.0
        for tgt in pool:
            try:
                score = self.scorer(src.value, tgt.value)
                if isinstance(score, bool) or not isinstance(score, numbers.Real):
                    raise TypeError(f"score non numérique: {score!r}")
                score = float(score)
                if not math.isfinite(score):
                    raise ValueError(f"score non fini: {score!r}")
            except Exception as e:
                failure = ScoringFailure(src.row_index, tgt.row_index, self.algorithm, f"{type(e).__name__}: {e}")
                outcome.failures.append(failure)
                logger.warning(
                    "Échec %s sur la paire source #%d / cible #%d : %s",
                    self.algorithm,
                    src.row_index,
                    tgt.row_index,
                    failure.error,
                )
                self._emit(MatchEvent("scoring_failure", source=src, target=tgt, message=failure.error))
                continue
            if best is None or score > best_score:
                best, best_score = tgt, score
        return best, best_score

    def _emit(self, event: MatchEvent) -> None:
        if self.on_event is None:
            return
        try:
            self.on_event(event)
        except Exception:
            logger.exception("Hook d'observation en échec sur l'événement %s", event.kind)


def match(
    source_strings: Iterable[Any],
    target_strings: Iterable[Any],
    algorithm: str = DEFAULT_ALGORITHM,
    threshold: float = DEFAULT_THRESHOLD,
    max_results: int = DEFAULT_MAX_RESULTS,
    on_event: EventHook | None = None,
) -> MatchingOutcome:
    """Raccourci : Linker(...).run(source_strings, target_strings)."""
    linker = Linker(algorithm=algorithm, threshold=threshold, max_results=max_results, on_event=on_event)
    return linker.run(source_strings, target_strings)


def search(
    query: str,
    candidates: Iterable[Any],
    algorithm: str = DEFAULT_ALGORITHM,
    limit: int = 10,
    min_score: float = 0.1,
) -> list[SearchHit]:
    """
    Recherche simple : classe les valeurs d'une colonne par similarité avec une requête.

    Args:
        query: Texte recherché (vide → aucun résultat).
        candidates: Valeurs candidates (les vides sont ignorées).
        algorithm: Identifiant d'algorithme (repli sur le défaut si inconnu).
        limit: Nombre maximal de résultats.
        min_score: Score strictement supérieur requis.

    Returns:
        Résultats triés par score décroissant, ordre d'origine à égalité.
    """
    if is_blank(query) or limit <= 0:
        return []
    query = clean_cell(query)
    algorithm_id, scorer, _ = resolve_algorithm(algorithm)
    hits: list[SearchHit] = []
    for item in prepare_items(candidates):
        try:
            score = float(scorer(query, item.value))
        except Exception as e:
            logger.warning("Échec %s sur %r : %s", algorithm_id, item.value, e)
            continue
        if score > min_score:
            hits.append(SearchHit(item.value, score, item.row_index))
    hits.sort(key=lambda h: h.score, reverse=True)
    return hits[:limit]
