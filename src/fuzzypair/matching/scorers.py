"""Fonctions de similarité entre deux chaînes (score normalisé 0-1)."""

from __future__ import annotations

import functools
from collections import Counter
from typing import Callable

from rapidfuzz.distance import Levenshtein

from fuzzypair.normalize import punct_to_space, strip_diacritics, tokenize

Scorer = Callable[[str, str], float]

SOUNDEX_MAP = {
    "b": "1", "f": "1", "p": "1", "v": "1",
    "c": "2", "g": "2", "j": "2", "k": "2", "q": "2", "s": "2", "x": "2", "z": "2",
    "d": "3", "t": "3",
    "l": "4",
    "m": "5", "n": "5",
    "r": "6",
}  # fmt: skip

FUZZYSEARCH_MAX_DISTANCE = 2


def similarity_scorer(func: Callable[[str, str], float]) -> Scorer:
    """
    Applique la politique commune à toutes les similarités.

    - vide / vide → 1.0, vide / non vide → 0.0
    - chaînes égales sans tenir compte de la casse → 1.0
    - résultat borné à [0, 1]

    Le corps de l'algorithme ne voit donc que des paires non triviales.
    Un résultat NaN est propagé tel quel (le linker le traite comme un échec).
    """

    @functools.wraps(func)
    def wrapper(a: str, b: str) -> float:
        if not a and not b:
            return 1.0
        if not a or not b:
            return 0.0
        if a.lower() == b.lower():
            return 1.0
        score = float(func(a, b))
        if score < 0.0:
            return 0.0
        if score > 1.0:
            return 1.0
        return score

    return wrapper


def edit_distance(a: str, b: str) -> int:
    """Distance de Levenshtein classique (insertion, suppression, substitution à coût 1)."""
    return Levenshtein.distance(a, b)


def _edit_ratio(a: str, b: str) -> float:
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    return (max_len - edit_distance(a, b)) / max_len


def _jaccard(set1: set[str], set2: set[str]) -> float:
    union = set1 | set2
    if not union:
        return 0.0
    return len(set1 & set2) / len(union)


# --- Distance d'édition ------------------------------------------------------


@similarity_scorer
def levenshtein_similarity(a: str, b: str) -> float:
    """(longueur max - distance) / longueur max, insensible à la casse."""
    return _edit_ratio(a.lower(), b.lower())


def jaro(s1: str, s2: str) -> float:
    """
    Similarité de Jaro (sensible à la casse, voir jaro_winkler_similarity).

    Fenêtre de correspondance : max(len) // 2 - 1. Une fenêtre négative
    (chaînes d'un caractère) ne permet aucune correspondance.
    """
    if s1 == s2:
        return 1.0
    len1, len2 = len(s1), len(s2)
    window = max(len1, len2) // 2 - 1
    if window < 0:
        return 0.0

    s1_matches = [False] * len1
    s2_matches = [False] * len2
    matches = 0
    for i in range(len1):
        start = max(0, i - window)
        end = min(i + window + 1, len2)
        for j in range(start, end):
            if s2_matches[j] or s1[i] != s2[j]:
                continue
            s1_matches[i] = True
            s2_matches[j] = True
            matches += 1
            break

    if matches == 0:
        return 0.0

    transpositions = 0
    k = 0
    for i in range(len1):
        if not s1_matches[i]:
            continue
        while not s2_matches[k]:
            k += 1
        if s1[i] != s2[k]:
            transpositions += 1
        k += 1

    return (matches / len1 + matches / len2 + (matches - transpositions / 2) / matches) / 3.0


@similarity_scorer
def jaro_winkler_similarity(a: str, b: str) -> float:
    """
    Jaro + bonus de préfixe commun.

    Le bonus n'est appliqué que si Jaro >= 0.7 : 0.1 par caractère de
    préfixe commun (4 au plus), pondéré par la distance restante à 1.
    """
    s1, s2 = a.lower(), b.lower()
    sim = jaro(s1, s2)
    if sim < 0.7:
        return sim
    prefix = 0
    for c1, c2 in zip(s1[:4], s2[:4]):
        if c1 != c2:
            break
        prefix += 1
    return sim + 0.1 * prefix * (1 - sim)


# --- Phonétique -----------------------------------------------------------------


def soundex_code(text: str) -> str:
    """
    Code Soundex sur 4 caractères (lettre initiale + 3 chiffres).

    Les accents sont retirés, seules les lettres a-z sont conservées.
    Voyelles et h/w/y ne sont pas codées mais séparent deux consonnes de
    même classe. Retourne "" si aucune lettre latine n'est présente.
    """
    letters = "".join(c for c in strip_diacritics(text.lower()) if "a" <= c <= "z")
    if not letters:
        return ""
    code = letters[0].upper()
    prev = SOUNDEX_MAP.get(letters[0], "")
    for c in letters[1:]:
        if len(code) >= 4:
            break
        digit = SOUNDEX_MAP.get(c, "")
        if digit and digit != prev:
            code += digit
        prev = digit
    return code.ljust(4, "0")[:4]


@similarity_scorer
def soundex_similarity(a: str, b: str) -> float:
    """Part des 4 positions identiques entre les deux codes Soundex."""
    code1, code2 = soundex_code(a), soundex_code(b)
    if not code1 or not code2:
        # Rien de codable d'un côté : pas de relation phonétique détectable
        return 0.0
    return sum(1 for c1, c2 in zip(code1, code2) if c1 == c2) / 4.0


# --- Tokens et vecteurs -------------------------------------------------------


@similarity_scorer
def cosine_similarity(a: str, b: str) -> float:
    """Cosinus entre vecteurs de fréquence des termes."""
    tokens1, tokens2 = tokenize(a), tokenize(b)
    if not tokens1 and not tokens2:
        return 1.0
    if not tokens1 or not tokens2:
        return 0.0
    tf1, tf2 = Counter(tokens1), Counter(tokens2)
    dot = sum(freq * tf2[term] for term, freq in tf1.items())
    mag1 = sum(f * f for f in tf1.values()) ** 0.5
    mag2 = sum(f * f for f in tf2.values()) ** 0.5
    magnitude = mag1 * mag2
    return dot / magnitude if magnitude else 0.0


@similarity_scorer
def jaccard_similarity(a: str, b: str) -> float:
    """Intersection / union des ensembles de tokens."""
    set1, set2 = set(tokenize(a)), set(tokenize(b))
    if not set1 and not set2:
        return 1.0
    return _jaccard(set1, set2)


def _bigrams(text: str) -> set[str]:
    text = text.lower()
    return {text[i : i + 2] for i in range(len(text) - 1)}


@similarity_scorer
def flexsearch_similarity(a: str, b: str) -> float:
    """70 % Jaccard sur les tokens + 30 % Jaccard sur les bigrammes de caractères."""
    token_sim = _jaccard(set(tokenize(a)), set(tokenize(b)))
    gram_sim = _jaccard(_bigrams(a), _bigrams(b))
    return token_sim * 0.7 + gram_sim * 0.3


# --- Heuristiques caractère -----------------------------------------------------


@similarity_scorer
def microfuzz_similarity(a: str, b: str) -> float:
    """
    Recouvrement de caractères alignés, les premières positions pesant plus.

    70 % recouvrement brut (sur la longueur max) + 30 % recouvrement pondéré
    par la position (sur la longueur min).
    """
    s1, s2 = a.lower().strip(), b.lower().strip()
    if s1 == s2:
        return 1.0
    if not s1 or not s2:
        return 0.0
    max_len = max(len(s1), len(s2))
    min_len = min(len(s1), len(s2))
    matches = 0
    position_bonus = 0.0
    for i in range(min_len):
        if s1[i] == s2[i]:
            matches += 1
            position_bonus += (max_len - i) / max_len
    return (matches / max_len) * 0.7 + (position_bonus / min_len) * 0.3


@similarity_scorer
def ufuzzy_similarity(a: str, b: str) -> float:
    """Maximum de : égalité, inclusion (0.8) et recouvrement des fréquences de caractères, sans accents."""
    norm1 = strip_diacritics(a).lower()
    norm2 = strip_diacritics(b).lower()
    if norm1 == norm2:
        return 1.0
    if not norm1 or not norm2:
        return 0.0
    substring = 0.8 if norm1 in norm2 or norm2 in norm1 else 0.0

    chars1, chars2 = Counter(norm1), Counter(norm2)
    common = sum((chars1 & chars2).values())
    total = sum((chars1 | chars2).values())
    char_sim = common / total if total else 0.0
    return max(substring, char_sim)


@similarity_scorer
def fuzzysearch_similarity(a: str, b: str) -> float:
    """Inclusion → rapport des longueurs, sinon ratio d'édition si la distance reste <= 2."""
    s1, s2 = a.lower(), b.lower()
    if s1 in s2 or s2 in s1:
        return min(len(s1), len(s2)) / max(len(s1), len(s2))
    distance = edit_distance(s1, s2)
    if distance <= FUZZYSEARCH_MAX_DISTANCE:
        max_len = max(len(s1), len(s2))
        return (max_len - distance) / max_len
    return 0.0


@similarity_scorer
def fuzzyjs_similarity(a: str, b: str) -> float:
    """
    Parcours de sous-séquence du motif (a) dans le texte (b).

    +1 par caractère trouvé, +0.5 × longueur de la série en cours pour les
    correspondances consécutives, bonus de 30 % pour les caractères trouvés
    à leur propre position. Motif non consommé entièrement → 0.
    """
    pattern, text = a.lower(), b.lower()
    score = 0.0
    p_idx = 0
    t_idx = 0
    consecutive = 0
    start_bonus = 0
    while p_idx < len(pattern) and t_idx < len(text):
        if pattern[p_idx] == text[t_idx]:
            score += 1
            if consecutive > 0:
                score += consecutive * 0.5
            consecutive += 1
            if t_idx == p_idx:
                start_bonus += 1
            p_idx += 1
        else:
            consecutive = 0
        t_idx += 1

    if p_idx < len(pattern):
        return 0.0
    return score / len(pattern) + start_bonus / len(pattern) * 0.3


# --- Moteurs de recherche simulés -----------------------------------------------


@similarity_scorer
def minisearch_similarity(a: str, b: str) -> float:
    """Moyenne, sur les tokens source, du meilleur score exact (1) / préfixe (0.8) / flou (ratio × 0.6)."""
    tokens1 = tokenize(a, min_length=2)
    tokens2 = tokenize(b, min_length=2)
    if not tokens1 and not tokens2:
        return 1.0
    if not tokens1 or not tokens2:
        return 0.0

    total = 0.0
    for t1 in tokens1:
        best = 0.0
        for t2 in tokens2:
            if t1 == t2:
                best = 1.0
                break
            if t2.startswith(t1) or t1.startswith(t2):
                best = max(best, 0.8)
            ratio = _edit_ratio(t1, t2)
            if ratio > 0.6:
                best = max(best, ratio * 0.6)
        total += best
    return total / len(tokens1)


def _meili_normalize(text: str) -> str:
    return punct_to_space(strip_diacritics(text.lower())).strip()


@similarity_scorer
def meilisearch_similarity(a: str, b: str) -> float:
    norm1, norm2 = _meili_normalize(a), _meili_normalize(b)
    if norm1 == norm2:
        return 1.0
    if norm1.startswith(norm2) or norm2.startswith(norm1):
        return 0.9 * min(len(norm1), len(norm2)) / max(len(norm1), len(norm2))

    words1, words2 = norm1.split(), norm2.split()
    total_words = max(len(words1), len(words2))
    word_matches = 0.0
    for w1 in words1:
        for w2 in words2:
            if w1 == w2:
                word_matches += 1
                break
            if len(w1) > 3 and len(w2) > 3:
                distance = edit_distance(w1, w2)
                if distance <= 2 and distance / max(len(w1), len(w2)) <= 0.3:
                    word_matches += 0.8
                    break
    return word_matches / total_words if total_words else 0.0


@similarity_scorer
def elasticsearch_similarity(a: str, b: str) -> float:
    """
    Meilleur de exact / préfixe / flou par token, normalisé par le nombre de tokens.

    Au moins 30 % des tokens doivent trouver une correspondance, sinon 0.
    Le score brut est ensuite multiplié par cette couverture.
    """
    tokens1 = tokenize(a, remove_diacritics=True)
    tokens2 = tokenize(b, remove_diacritics=True)
    if not tokens1 and not tokens2:
        return 1.0
    if not tokens1 or not tokens2:
        return 0.0

    max_tokens = max(len(tokens1), len(tokens2))
    matched_tokens = 0
    total = 0.0
    for t1 in tokens1:
        best = 0.0
        has_match = False
        for t2 in tokens2:
            if t1 == t2:
                best = 1.0
                has_match = True
                break
            if len(t1) >= 2 and len(t2) >= 2 and (t2.startswith(t1) or t1.startswith(t2)):
                overlap = min(len(t1), len(t2)) / max(len(t1), len(t2))
                if overlap > 0.4:
                    best = max(best, overlap * 0.8 * 0.8)
                    has_match = True
            if len(t1) >= 3 and len(t2) >= 3:
                max_len = max(len(t1), len(t2))
                distance = edit_distance(t1, t2)
                if distance <= max(1, int(max_len * 0.25)):
                    ratio = (max_len - distance) / max_len
                    if ratio > 0.5:
                        best = max(best, ratio * 0.7 * 0.6)
                        has_match = True
        if has_match:
            matched_tokens += 1
            total += best

    coverage = matched_tokens / max_tokens
    if coverage < 0.3:
        return 0.0
    return (total / max_tokens) * coverage
