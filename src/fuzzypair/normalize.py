"""Normalisation de texte partagée par les algorithmes et les lecteurs de tableurs."""

from __future__ import annotations

import math
import re
import unicodedata
from typing import Any

_NON_WORD_RE = re.compile(r"[^\w\s]")


def strip_diacritics(s: str) -> str:
    """Retire les diacritiques (accents) d'une chaîne : NFD puis suppression des marques combinantes."""
    nfd = unicodedata.normalize("NFD", s)
    return "".join(c for c in nfd if not unicodedata.combining(c))


def is_blank(val: Any) -> bool:
    """True si la valeur est absente, NaN ou ne contient que des espaces."""
    if val is None:
        return True
    if isinstance(val, float) and math.isnan(val):
        return True
    return str(val).strip() == ""


def safe_str(val: Any) -> str:
    """Convertit une valeur de cellule en chaîne (None/NaN/inf → vide)."""
    if val is None or (isinstance(val, float) and (math.isnan(val) or math.isinf(val))):
        return ""
    return str(val)


def clean_cell(val: Any) -> str:
    """Valeur de cellule prête pour le matching : stringifiée puis strip."""
    return safe_str(val).strip()


def tokenize(text: str, *, min_length: int = 1, remove_diacritics: bool = False) -> list[str]:
    """
    Découpe un texte en tokens minuscules (ponctuation → séparateur).

    Args:
        text: Texte source.
        min_length: Longueur minimale d'un token conservé.
        remove_diacritics: Supprimer les accents avant découpage.
    """
    text = text.lower()
    if remove_diacritics:
        text = strip_diacritics(text)
    text = _NON_WORD_RE.sub(" ", text)
    return [t for t in text.split() if len(t) >= min_length]


def punct_to_space(text: str) -> str:
    """Remplace la ponctuation par des espaces (sans découper)."""
    return _NON_WORD_RE.sub(" ", text)
