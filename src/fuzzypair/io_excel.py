"""I/O tableurs : chargement et sauvegarde (Excel, ODS, CSV)."""

from __future__ import annotations

import csv
import logging
import re
from pathlib import Path

import pandas as pd

from fuzzypair.config import Config, FuzzyPairError
from fuzzypair.normalize import clean_cell

logger = logging.getLogger(__name__)

# Formats supportés
SUPPORTED_INPUT_EXTENSIONS = (".xlsx", ".xls", ".ods", ".csv")
SUPPORTED_INPUT_FILTER = "Tableurs (*.xlsx *.xls *.ods *.csv);;Excel (*.xlsx *.xls);;ODS (*.ods);;CSV (*.csv);;Tous (*.*)"

CSV_SHEET_NAME = "(données)"
CSV_DELIMITERS = [",", ";", "\t", "|"]
CSV_ENCODINGS = ("utf-8", "latin-1")

_INVALID_SHEET_CHARS_RE = re.compile(r"[\[\]:*?/\\]")


class ExcelFileError(FuzzyPairError):
    """Erreur de chargement d'un fichier (fichier absent, feuille ou colonne inexistante)."""


def is_supported_file(filepath: str | Path) -> bool:
    """True si l'extension du fichier fait partie des formats lus."""
    return Path(filepath).suffix.lower() in SUPPORTED_INPUT_EXTENSIONS


def _get_engine(path: Path) -> str | None:
    """Retourne le moteur pandas selon l'extension, ou None pour auto."""
    suffix = path.suffix.lower()
    if suffix == ".xlsx":
        return "openpyxl"
    if suffix == ".xls":
        return "xlrd"
    if suffix == ".ods":
        return "odf"
    return None


def _is_csv(path: Path) -> bool:
    return path.suffix.lower() == ".csv"


def _detect_csv_delimiter(path: Path, encoding: str, *, skip_rows: int = 0) -> str | None:
    """Devine le séparateur sur les premières lignes non vides (Sniffer, sinon comptage)."""
    try:
        with path.open("r", encoding=encoding, errors="replace") as f:
            for _ in range(skip_rows):
                if f.readline() == "":
                    return None
            sample_lines: list[str] = []
            for line in f:
                if line.strip() == "":
                    continue
                sample_lines.append(line)
                if len(sample_lines) >= 5:
                    break
    except OSError:
        return None
    if not sample_lines:
        return None
    try:
        return csv.Sniffer().sniff("".join(sample_lines), delimiters=CSV_DELIMITERS).delimiter
    except csv.Error:
        first = sample_lines[0]
        counts = {d: first.count(d) for d in CSV_DELIMITERS}
        best = max(counts, key=counts.get)
        return best if counts[best] > 0 else None


def _open_workbook(path: Path) -> pd.ExcelFile:
    try:
        engine = _get_engine(path)
        return pd.ExcelFile(path, engine=engine) if engine else pd.ExcelFile(path)
    except ImportError as e:
        ext = path.suffix.lower()
        if ext == ".xls":
            raise ExcelFileError(f"Format .xls requis: pip install xlrd. Détail: {e}") from e
        if ext == ".ods":
            raise ExcelFileError(f"Format ODS requis: pip install odfpy. Détail: {e}") from e
        raise ExcelFileError(f"Impossible de lire {path}: {e}") from e
    except Exception as e:
        raise ExcelFileError(f"Impossible de lire le fichier {path}: {e}") from e


def list_sheets(filepath: str | Path) -> list[str]:
    """
    Liste les noms des feuilles d'un fichier tableur.

    Formats supportés : .xlsx, .xls, .ods, .csv (une seule "feuille" pour CSV).

    Raises:
        ExcelFileError: Si le fichier est absent ou illisible.
    """
    path = Path(filepath)
    if not path.exists():
        raise ExcelFileError(f"Fichier introuvable: {path}")
    if _is_csv(path):
        return [CSV_SHEET_NAME]
    return [str(s) for s in _open_workbook(path).sheet_names]


def _load_csv(path: Path, header_idx: int) -> pd.DataFrame:
    skiprows = range(header_idx) if header_idx > 0 else None
    last_error: Exception | None = None
    for encoding in CSV_ENCODINGS:
        delimiter = _detect_csv_delimiter(path, encoding, skip_rows=header_idx) or ","
        try:
            return pd.read_csv(path, dtype=str, encoding=encoding, header=0, skiprows=skiprows, sep=delimiter)
        except UnicodeDecodeError as e:
            logger.debug("%s illisible en %s, essai suivant", path, encoding)
            last_error = e
            continue
        except pd.errors.ParserError:
            # Lignes de longueur variable : moteur python, lignes invalides ignorées.
            try:
                return pd.read_csv(
                    path,
                    dtype=str,
                    encoding=encoding,
                    header=0,
                    skiprows=skiprows,
                    sep=delimiter,
                    engine="python",
                    on_bad_lines="warn",
                )
            except UnicodeDecodeError as e:
                last_error = e
                continue
            except Exception as e:
                raise ExcelFileError(
                    f"Erreur CSV {path}: {e}. Vérifiez la ligne d'en-tête et le séparateur."
                ) from e
        except pd.errors.EmptyDataError as e:
            raise ExcelFileError(f"Fichier CSV vide: {path}") from e
        except Exception as e:
            raise ExcelFileError(f"Erreur CSV {path}: {e}") from e
    raise ExcelFileError(f"Erreur CSV {path}: encodage non reconnu ({last_error})")


def load_sheet(
    filepath: str | Path,
    sheet_name: str | None = None,
    *,
    header_row: int = 1,
) -> pd.DataFrame:
    """
    Charge une feuille dans un DataFrame en préservant le texte (toutes les cellules en str).

    Formats supportés : .xlsx, .xls, .ods, .csv.

    Args:
        filepath: Chemin vers le fichier.
        sheet_name: Nom de la feuille (None = première). Ignoré pour CSV.
        header_row: Numéro de ligne (1-based) contenant les en-têtes.

    Raises:
        ExcelFileError: Si le fichier est absent, illisible ou si la feuille n'existe pas.
    """
    path = Path(filepath)
    if not path.exists():
        raise ExcelFileError(f"Fichier introuvable: {path}")

    header_idx = max(header_row - 1, 0)
    if _is_csv(path):
        return _load_csv(path, header_idx)

    xl = _open_workbook(path)
    if sheet_name is None:
        sheet_name = xl.sheet_names[0]  # type: ignore[assignment]
    elif sheet_name not in xl.sheet_names:
        sheets = [str(s) for s in xl.sheet_names]
        raise ExcelFileError(
            f"Feuille '{sheet_name}' introuvable dans {path}. Feuilles: {', '.join(sheets)}"
        )

    try:
        df = pd.read_excel(xl, sheet_name=sheet_name, dtype=str, header=header_idx)
    except Exception as e:
        raise ExcelFileError(f"Erreur feuille '{sheet_name}' dans {path}: {e}") from e
    logger.debug("%s [%s] : %d lignes, %d colonnes", path.name, sheet_name, len(df), len(df.columns))
    return df  # type: ignore[return-value]


def list_columns(df: pd.DataFrame) -> list[str]:
    """Noms de colonnes (en str) dans l'ordre de la feuille."""
    return [str(c) for c in df.columns]


def extract_column(df: pd.DataFrame, column: str) -> list[str]:
    """
    Extrait une colonne en liste de chaînes nettoyées, position par position.

    Les cellules vides deviennent "" (et non supprimées) pour que l'index reste
    celui de la ligne du tableur.

    Raises:
        ExcelFileError: Si la colonne n'existe pas.
    """
    if column not in df.columns:
        raise ExcelFileError(
            f"Colonne '{column}' introuvable. Colonnes disponibles: {', '.join(list_columns(df))}"
        )
    return [clean_cell(v) for v in df[column].tolist()]


def save_xlsx(
    filepath: str | Path,
    dataframes: dict[str, pd.DataFrame],
    *,
    header: bool = True,
    index: bool = False,
) -> None:
    """
    Sauvegarde plusieurs DataFrames dans un fichier xlsx (une feuille par DataFrame).

    Args:
        filepath: Chemin de sortie.
        dataframes: Dict {nom_feuille: DataFrame}, ordre conservé.
    """
    with pd.ExcelWriter(filepath, engine="openpyxl") as writer:
        for sheet_name, df in dataframes.items():
            # Excel limite les noms de feuilles à 31 caractères, sans []:*?/\
            safe_name = _INVALID_SHEET_CHARS_RE.sub("_", str(sheet_name))[:31]
            df.to_excel(writer, sheet_name=safe_name, index=index, header=header)


def load_source_target(config: Config) -> tuple[pd.DataFrame, pd.DataFrame]:
    """
    Charge les DataFrames source et cible selon la configuration.

    Returns:
        (df_source, df_target)
    """
    if config.single_file:
        path = Path(config.single_file)
        df_source = load_sheet(path, config.source_sheet_in_single, header_row=config.source_header_row)
        df_target = load_sheet(path, config.target_sheet_in_single, header_row=config.target_header_row)
    else:
        df_source = load_sheet(config.source_file, config.source_sheet, header_row=config.source_header_row)
        df_target = load_sheet(config.target_file, config.target_sheet, header_row=config.target_header_row)
    return df_source, df_target
