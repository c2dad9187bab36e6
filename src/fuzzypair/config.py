"""Configuration et chargement du fichier config JSON."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_ALGORITHM = "levenshtein"
DEFAULT_THRESHOLD = 0.6
DEFAULT_MAX_RESULTS = 1000


class FuzzyPairError(Exception):
    """Exception de base pour FuzzyPair."""


class ConfigError(FuzzyPairError, ValueError):
    """Erreur de validation de la configuration."""


class ConfigFileError(FuzzyPairError):
    """Erreur de chargement du fichier de configuration (fichier absent, JSON invalide)."""


class InvalidInputError(FuzzyPairError, ValueError):
    """Entrées du matching inutilisables (colonne vide après filtrage, paramètres hors bornes)."""


def _str_list(value: Any, name: str) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ConfigError(f"{name} doit être une liste de noms de colonnes (got {value!r})")
    return [str(v) for v in value]


@dataclass
class Config:
    """Configuration principale de FuzzyPair."""

    source_file: str = ""
    target_file: str = ""
    source_sheet: str | None = None  # None = première feuille
    target_sheet: str | None = None
    # Si un seul fichier avec deux feuilles
    single_file: str | None = None
    source_sheet_in_single: str | None = None
    target_sheet_in_single: str | None = None
    source_header_row: int = 1
    target_header_row: int = 1

    source_column: str = ""
    target_column: str = ""
    additional_source_columns: list[str] = field(default_factory=list)
    additional_target_columns: list[str] = field(default_factory=list)

    algorithm: str = DEFAULT_ALGORITHM
    threshold: float = DEFAULT_THRESHOLD
    max_results: int = DEFAULT_MAX_RESULTS
    simple_mode: bool = False
    export_unmatched: bool = True

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Config:
        single_file = d.get("single_file")
        source_file = d.get("source_file", "")
        target_file = d.get("target_file", "")
        source_column = str(d.get("source_column") or "").strip()
        target_column = str(d.get("target_column") or "").strip()
        # Un identifiant inconnu n'est pas une erreur : le linker retombe sur l'algorithme par défaut.
        algorithm = str(d.get("algorithm") or DEFAULT_ALGORITHM).strip()

        try:
            threshold = float(d.get("threshold", DEFAULT_THRESHOLD))
            max_results = int(d.get("max_results", DEFAULT_MAX_RESULTS))
            source_header_row = int(d.get("source_header_row", 1))
            target_header_row = int(d.get("target_header_row", 1))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Paramètre numérique invalide: {e}") from e

        if single_file:
            if not d.get("source_sheet_in_single") or not d.get("target_sheet_in_single"):
                raise ConfigError("single_file requis: source_sheet_in_single et target_sheet_in_single")
        else:
            if not source_file or not target_file:
                raise ConfigError("source_file et target_file requis (ou single_file avec feuilles)")

        if not source_column or not target_column:
            raise ConfigError("source_column et target_column requis")
        if not 0 <= threshold <= 1:
            raise ConfigError(f"threshold doit être entre 0 et 1 (got {threshold})")
        if max_results < 0:
            raise ConfigError(f"max_results doit être >= 0 (got {max_results})")
        if source_header_row < 1 or target_header_row < 1:
            raise ConfigError("source_header_row et target_header_row doivent être >= 1")

        return cls(
            source_file=source_file,
            target_file=target_file,
            source_sheet=d.get("source_sheet"),
            target_sheet=d.get("target_sheet"),
            single_file=single_file,
            source_sheet_in_single=d.get("source_sheet_in_single"),
            target_sheet_in_single=d.get("target_sheet_in_single"),
            source_header_row=source_header_row,
            target_header_row=target_header_row,
            source_column=source_column,
            target_column=target_column,
            additional_source_columns=_str_list(d.get("additional_source_columns"), "additional_source_columns"),
            additional_target_columns=_str_list(d.get("additional_target_columns"), "additional_target_columns"),
            algorithm=algorithm,
            threshold=threshold,
            max_results=max_results,
            simple_mode=bool(d.get("simple_mode", False)),
            export_unmatched=bool(d.get("export_unmatched", True)),
        )

    @classmethod
    def load(cls, path: str | Path) -> Config:
        """
        Charge la configuration depuis un fichier JSON.

        Raises:
            ConfigFileError: Si le fichier est absent ou le JSON invalide.
            ConfigError: Si la configuration est invalide.
        """
        path = Path(path).resolve()
        if not path.exists():
            raise ConfigFileError(f"Fichier de configuration introuvable: {path}")

        try:
            with open(path, encoding="utf-8") as f:
                d = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigFileError(f"JSON invalide dans {path}: {e}") from e
        except OSError as e:
            raise ConfigFileError(f"Impossible de lire {path}: {e}") from e

        if not isinstance(d, dict):
            raise ConfigFileError(f"Fichier de configuration invalide: {path} doit contenir un objet JSON")

        config = cls.from_dict(d)
        config.resolve_paths(path.parent)
        return config

    def resolve_paths(self, base_dir: Path) -> None:
        """
        Résout les chemins relatifs par rapport au répertoire de base (ex. dossier du fichier config).

        Modifie source_file, target_file et single_file en place.
        """
        base = Path(base_dir)
        if self.source_file and not Path(self.source_file).is_absolute():
            self.source_file = str((base / self.source_file).resolve())
        if self.target_file and not Path(self.target_file).is_absolute():
            self.target_file = str((base / self.target_file).resolve())
        if self.single_file and not Path(self.single_file).is_absolute():
            self.single_file = str((base / self.single_file).resolve())

    def to_dict(self) -> dict[str, Any]:
        """Sérialise la configuration (inverse de from_dict)."""
        return {
            "source_file": self.source_file,
            "target_file": self.target_file,
            "source_sheet": self.source_sheet,
            "target_sheet": self.target_sheet,
            "single_file": self.single_file,
            "source_sheet_in_single": self.source_sheet_in_single,
            "target_sheet_in_single": self.target_sheet_in_single,
            "source_header_row": self.source_header_row,
            "target_header_row": self.target_header_row,
            "source_column": self.source_column,
            "target_column": self.target_column,
            "additional_source_columns": list(self.additional_source_columns),
            "additional_target_columns": list(self.additional_target_columns),
            "algorithm": self.algorithm,
            "threshold": self.threshold,
            "max_results": self.max_results,
            "simple_mode": self.simple_mode,
            "export_unmatched": self.export_unmatched,
        }

    @property
    def source_name(self) -> str:
        """Nom court de la source (pour en-têtes de rapport)."""
        if self.single_file:
            return self.source_sheet_in_single or Path(self.single_file).stem
        return Path(self.source_file).name if self.source_file else "source"

    @property
    def target_name(self) -> str:
        """Nom court de la cible (pour en-têtes de rapport)."""
        if self.single_file:
            return self.target_sheet_in_single or Path(self.single_file).stem
        return Path(self.target_file).name if self.target_file else "target"
