"""Tests des cas d'erreur."""

from pathlib import Path

import pandas as pd
import pytest

from fuzzypair import ConfigError, ConfigFileError, ExcelFileError, FuzzyPairError, InvalidInputError
from fuzzypair.cli import main
from fuzzypair.config import Config
from fuzzypair.io_excel import extract_column, load_sheet


def test_exception_hierarchy() -> None:
    for exc in (ConfigError, ConfigFileError, ExcelFileError, InvalidInputError):
        assert issubclass(exc, FuzzyPairError)
    assert issubclass(ConfigError, ValueError)
    assert issubclass(InvalidInputError, ValueError)


def test_config_load_file_not_found(tmp_path: Path) -> None:
    """Config.load() lève ConfigFileError si le fichier n'existe pas."""
    with pytest.raises(ConfigFileError, match="introuvable"):
        Config.load(tmp_path / "inexistant.json")


def test_config_load_invalid_json(tmp_path: Path) -> None:
    """Config.load() lève ConfigFileError si le JSON est invalide."""
    bad_json = tmp_path / "config.json"
    bad_json.write_text("{ invalid json }", encoding="utf-8")
    with pytest.raises(ConfigFileError, match="JSON invalide"):
        Config.load(bad_json)


def test_config_load_not_dict(tmp_path: Path) -> None:
    """Config.load() lève ConfigFileError si le JSON n'est pas un objet."""
    bad_config = tmp_path / "config.json"
    bad_config.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(ConfigFileError, match="objet JSON"):
        Config.load(bad_config)


def test_load_sheet_file_not_found(tmp_path: Path) -> None:
    with pytest.raises(ExcelFileError, match="introuvable"):
        load_sheet(tmp_path / "inexistant.xlsx")


def test_load_sheet_missing_sheet(tmp_path: Path) -> None:
    xlsx = tmp_path / "test.xlsx"
    pd.DataFrame({"a": [1]}).to_excel(xlsx, sheet_name="Feuille1", index=False, engine="openpyxl")
    with pytest.raises(ExcelFileError, match="Feuille 'Inexistante' introuvable"):
        load_sheet(xlsx, sheet_name="Inexistante")


def test_extract_missing_column_lists_available() -> None:
    df = pd.DataFrame({"nom": ["a"], "ville": ["b"]})
    with pytest.raises(ExcelFileError, match="nom, ville"):
        extract_column(df, "name")


def test_cli_config_error_exit_code(capsys: pytest.CaptureFixture[str]) -> None:
    """La CLI retourne 1 et affiche un message sur stderr en cas d'erreur."""
    exit_code = main(["run", "--config", "/chemin/inexistant.json", "--dry-run"])
    assert exit_code == 1
    assert "Erreur:" in capsys.readouterr().err


def test_cli_missing_column_exit_code(xlsx_pair: tuple[Path, Path], capsys: pytest.CaptureFixture[str]) -> None:
    src, tgt = xlsx_pair
    exit_code = main(
        ["match", str(src), str(tgt), "--source-column", "absent", "--target-column", "name", "--dry-run"]
    )
    assert exit_code == 1
    assert "absent" in capsys.readouterr().err


def test_cli_empty_column_exit_code(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    src = tmp_path / "vide.xlsx"
    tgt = tmp_path / "cible.xlsx"
    pd.DataFrame({"nom": [None, None]}).to_excel(src, index=False, engine="openpyxl")
    pd.DataFrame({"name": ["x"]}).to_excel(tgt, index=False, engine="openpyxl")
    exit_code = main(["match", str(src), str(tgt), "--source-column", "nom", "--target-column", "name", "--dry-run"])
    assert exit_code == 1
    assert "Aucune donnée" in capsys.readouterr().err


def test_cli_output_required_without_dry_run(xlsx_pair: tuple[Path, Path]) -> None:
    src, tgt = xlsx_pair
    with pytest.raises(SystemExit):
        main(["match", str(src), str(tgt), "--source-column", "nom", "--target-column", "name"])
