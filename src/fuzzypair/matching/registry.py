"""Table des algorithmes : identifiant → fonction de similarité + métadonnées."""

from __future__ import annotations

import logging

from fuzzypair.config import DEFAULT_ALGORITHM
from fuzzypair.matching import scorers
from fuzzypair.matching.schema import AlgorithmInfo
from fuzzypair.matching.scorers import Scorer

logger = logging.getLogger(__name__)

VALID_CATEGORIES = ("basic", "advanced", "search-engine")
VALID_PERFORMANCE = ("fast", "medium", "slow")

_ALGORITHMS: dict[str, AlgorithmInfo] = {}
_SCORERS: dict[str, Scorer] = {}


def register_algorithm(info: AlgorithmInfo, scorer: Scorer, *, replace: bool = False) -> None:
    """
    Ajoute un algorithme à la table.

    Le linker ne dépend que de cette table : un nouvel algorithme n'a besoin
    que d'une fonction (a, b) -> float. Appliquer similarity_scorer au
    besoin pour hériter de la politique commune (vides, casse, bornes).

    Raises:
        ValueError: Identifiant déjà présent (sans replace) ou métadonnées invalides.
    """
    if not info.id:
        raise ValueError("Identifiant d'algorithme vide")
    if info.id in _SCORERS and not replace:
        raise ValueError(f"Algorithme déjà enregistré: {info.id!r}")
    if info.category not in VALID_CATEGORIES:
        raise ValueError(f"category invalide: {info.category!r}. Valides: {list(VALID_CATEGORIES)}")
    if info.performance not in VALID_PERFORMANCE:
        raise ValueError(f"performance invalide: {info.performance!r}. Valides: {list(VALID_PERFORMANCE)}")
    _ALGORITHMS[info.id] = info
    _SCORERS[info.id] = scorer


def unregister_algorithm(algorithm_id: str) -> None:
    """Retire un algorithme (l'algorithme par défaut ne peut pas être retiré)."""
    if algorithm_id == DEFAULT_ALGORITHM:
        raise ValueError("L'algorithme par défaut ne peut pas être retiré")
    _ALGORITHMS.pop(algorithm_id, None)
    _SCORERS.pop(algorithm_id, None)


def algorithm_ids() -> list[str]:
    return list(_ALGORITHMS)


def list_algorithms(category: str | None = None) -> list[AlgorithmInfo]:
    """Descripteurs dans l'ordre d'enregistrement, filtrés par catégorie si demandé."""
    return [a for a in _ALGORITHMS.values() if category is None or a.category == category]


def get_algorithm_info(algorithm_id: str) -> AlgorithmInfo:
    """Descripteur d'un algorithme (celui par défaut si l'identifiant est inconnu)."""
    return _ALGORITHMS.get(algorithm_id, _ALGORITHMS[DEFAULT_ALGORITHM])


def get_scorer(algorithm_id: str) -> Scorer:
    """Fonction de similarité d'un algorithme connu (KeyError sinon)."""
    return _SCORERS[algorithm_id]


def resolve_algorithm(algorithm_id: str | None) -> tuple[str, Scorer, str | None]:
    """
    Résout un identifiant en (identifiant effectif, fonction, avertissement).

    Un identifiant inconnu ne fait pas échouer la requête : l'algorithme par
    défaut est utilisé et un avertissement est retourné (et journalisé).
    """
    key = (algorithm_id or "").strip()
    if key in _SCORERS:
        return key, _SCORERS[key], None
    warning = f"Algorithme inconnu {algorithm_id!r}, repli sur {DEFAULT_ALGORITHM!r}"
    logger.warning(warning)
    return DEFAULT_ALGORITHM, _SCORERS[DEFAULT_ALGORITHM], warning


_BUILTINS: list[tuple[AlgorithmInfo, Scorer]] = [
    (
        AlgorithmInfo(
            "levenshtein",
            "Levenshtein Distance",
            "Nombre minimal d'éditions d'un caractère (insertion, suppression, substitution)",
            best_for="Fautes de frappe, correspondance caractère à caractère",
            strength="Très bon sur les différences de quelques caractères",
            category="basic",
            performance="fast",
        ),
        scorers.levenshtein_similarity,
    ),
    (
        AlgorithmInfo(
            "jaro-winkler",
            "Jaro-Winkler Distance",
            "Donne plus de poids aux chaînes qui commencent de la même façon",
            best_for="Noms, chaînes courtes, préfixes",
            strength="Excellent pour les noms de personnes",
            category="basic",
            performance="fast",
        ),
        scorers.jaro_winkler_similarity,
    ),
    (
        AlgorithmInfo(
            "soundex",
            "Soundex",
            "Correspondance phonétique (prononciation anglaise)",
            best_for="Noms, patronymes, homophones",
            strength="Rapproche les mots qui se prononcent pareil",
            category="basic",
            performance="fast",
        ),
        scorers.soundex_similarity,
    ),
    (
        AlgorithmInfo(
            "cosine",
            "Cosine Similarity",
            "Similarité vectorielle sur la fréquence des termes",
            best_for="Descriptions, textes longs",
            strength="Robuste à l'ordre des mots",
            category="basic",
            performance="medium",
        ),
        scorers.cosine_similarity,
    ),
    (
        AlgorithmInfo(
            "jaccard",
            "Jaccard Similarity",
            "Intersection / union des ensembles de mots",
            best_for="Catégories, mots-clés, étiquettes",
            strength="Simple et efficace pour les ensembles",
            category="basic",
            performance="fast",
        ),
        scorers.jaccard_similarity,
    ),
    (
        AlgorithmInfo(
            "flexsearch",
            "FlexSearch (heuristique)",
            "Mélange Jaccard mots (70 %) et bigrammes de caractères (30 %)",
            best_for="Recherche plein texte, auto-complétion",
            strength="Tolère les mots partiellement différents",
            category="advanced",
            performance="fast",
        ),
        scorers.flexsearch_similarity,
    ),
    (
        AlgorithmInfo(
            "microfuzz",
            "MicroFuzz (heuristique)",
            "Recouvrement de caractères alignés, début de chaîne favorisé",
            best_for="Petits jeux de données, codes alignés",
            strength="Très léger",
            category="advanced",
            performance="fast",
        ),
        scorers.microfuzz_similarity,
    ),
    (
        AlgorithmInfo(
            "ufuzzy",
            "μFuzzy (heuristique)",
            "Comparaison insensible aux accents : égalité, inclusion, fréquence de caractères",
            best_for="Texte international, données multilingues",
            strength="Bonne gestion de l'Unicode",
            category="advanced",
            performance="fast",
        ),
        scorers.ufuzzy_similarity,
    ),
    (
        AlgorithmInfo(
            "fuzzysearch",
            "FuzzySearch (heuristique)",
            "Inclusion de sous-chaîne, sinon distance d'édition bornée à 2",
            best_for="Recherches rapides, sous-chaînes",
            strength="Simple et prévisible",
            category="advanced",
            performance="fast",
        ),
        scorers.fuzzysearch_similarity,
    ),
    (
        AlgorithmInfo(
            "fuzzysort",
            "FuzzySort (approximation Levenshtein)",
            "Identifiant conservé ; score calculé par la similarité de Levenshtein",
            best_for="Recherche temps réel",
            strength="Comportement identique à levenshtein",
            category="advanced",
            performance="fast",
        ),
        scorers.levenshtein_similarity,
    ),
    (
        AlgorithmInfo(
            "fast-fuzzy",
            "Fast-Fuzzy (approximation Levenshtein)",
            "Identifiant conservé ; score calculé par la similarité de Levenshtein",
            best_for="Applications sensibles aux performances",
            strength="Comportement identique à levenshtein",
            category="advanced",
            performance="fast",
        ),
        scorers.levenshtein_similarity,
    ),
    (
        AlgorithmInfo(
            "fuzzyjs",
            "Fuzzy.js (heuristique)",
            "Sous-séquence ordonnée avec bonus de consécutivité et de début de chaîne",
            best_for="Abréviations, saisie partielle",
            strength="Favorise les correspondances contiguës",
            category="advanced",
            performance="medium",
        ),
        scorers.fuzzyjs_similarity,
    ),
    (
        AlgorithmInfo(
            "minisearch",
            "MiniSearch (heuristique)",
            "Meilleur score par mot : exact, préfixe, puis flou",
            best_for="Petits et moyens jeux de données",
            strength="Recherche plein texte compacte",
            category="advanced",
            performance="medium",
        ),
        scorers.minisearch_similarity,
    ),
    (
        AlgorithmInfo(
            "meilisearch",
            "Meilisearch (simulé)",
            "Tolérance aux fautes : égalité, préfixe, puis mots proches",
            best_for="Catalogues produits, contenus",
            strength="Tolérance aux fautes de frappe",
            category="search-engine",
            performance="medium",
        ),
        scorers.meilisearch_similarity,
    ),
    (
        AlgorithmInfo(
            "elasticsearch",
            "Elasticsearch (simulé)",
            "Score par token (exact, préfixe, flou) avec couverture minimale de 30 %",
            best_for="Recherche d'entreprise, requêtes multi-mots",
            strength="Limite les faux positifs sur les textes longs",
            category="search-engine",
            performance="slow",
        ),
        scorers.elasticsearch_similarity,
    ),
    (
        AlgorithmInfo(
            "fuse",
            "Fuse (approximation Levenshtein)",
            "Identifiant historique ; score calculé par la similarité de Levenshtein",
            best_for="Usage général",
            strength="Comportement identique à levenshtein",
            category="basic",
            performance="fast",
        ),
        scorers.levenshtein_similarity,
    ),
]

for _info, _scorer in _BUILTINS:
    register_algorithm(_info, _scorer)
