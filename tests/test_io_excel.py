"""Tests du module I/O tableurs."""

from pathlib import Path

import pandas as pd
import pytest

from fuzzypair.config import Config
from fuzzypair.io_excel import (
    extract_column,
    is_supported_file,
    list_columns,
    list_sheets,
    load_sheet,
    load_source_target,
    save_xlsx,
)


def test_list_sheets(tmp_path: Path) -> None:
    path = tmp_path / "test.xlsx"
    with pd.ExcelWriter(path, engine="openpyxl") as w:
        pd.DataFrame({"a": [1]}).to_excel(w, sheet_name="Feuille1", index=False)
        pd.DataFrame({"x": [1]}).to_excel(w, sheet_name="Feuille2", index=False)
    assert list_sheets(path) == ["Feuille1", "Feuille2"]


def test_list_sheets_csv(tmp_path: Path) -> None:
    path = tmp_path / "data.csv"
    path.write_text("a,b\n1,2\n", encoding="utf-8")
    assert list_sheets(path) == ["(données)"]


def test_load_sheet_default_first_as_text(tmp_path: Path) -> None:
    path = tmp_path / "test.xlsx"
    pd.DataFrame({"col": ["a", "b"], "num": [1, 2]}).to_excel(path, index=False, engine="openpyxl")
    df = load_sheet(path)
    assert len(df) == 2
    assert list_columns(df) == ["col", "num"]
    assert df["num"].tolist() == ["1", "2"]


def test_load_sheet_header_row(tmp_path: Path) -> None:
    path = tmp_path / "titre.xlsx"
    pd.DataFrame({"nom": ["Dupont"]}).to_excel(path, index=False, startrow=1, engine="openpyxl")
    df = load_sheet(path, header_row=2)
    assert "nom" in df.columns
    assert df["nom"].tolist() == ["Dupont"]


def test_load_csv_semicolon(tmp_path: Path) -> None:
    path = tmp_path / "data.csv"
    path.write_text("nom;ville\nDupont;Paris\nMartin;Lyon\n", encoding="utf-8")
    df = load_sheet(path)
    assert list_columns(df) == ["nom", "ville"]
    assert extract_column(df, "ville") == ["Paris", "Lyon"]


def test_load_csv_latin1_fallback(tmp_path: Path) -> None:
    path = tmp_path / "latin.csv"
    path.write_bytes("nom;ville\nHélène;Nîmes\n".encode("latin-1"))
    df = load_sheet(path)
    assert extract_column(df, "nom") == ["Hélène"]


def test_extract_column_keeps_positions() -> None:
    df = pd.DataFrame({"nom": [" Dupont ", None, "", "Martin"]})
    assert extract_column(df, "nom") == ["Dupont", "", "", "Martin"]


def test_save_xlsx(tmp_path: Path) -> None:
    path = tmp_path / "out.xlsx"
    save_xlsx(path, {"Sheet1": pd.DataFrame({"a": [1]}), "Sheet2": pd.DataFrame({"b": [2]})})
    assert list_sheets(path) == ["Sheet1", "Sheet2"]


def test_save_xlsx_sanitizes_sheet_names(tmp_path: Path) -> None:
    path = tmp_path / "out.xlsx"
    save_xlsx(path, {"Unmatched clients/2024 [copie].xlsx with a long name": pd.DataFrame({"a": [1]})})
    (name,) = list_sheets(path)
    assert len(name) <= 31
    assert "/" not in name and "[" not in name


@pytest.mark.parametrize(
    "name,expected",
    [("a.xlsx", True), ("a.XLS", True), ("a.ods", True), ("a.csv", True), ("a.txt", False), ("a", False)],
)
def test_is_supported_file(name: str, expected: bool) -> None:
    assert is_supported_file(name) is expected


def test_load_source_target_two_files(xlsx_pair: tuple[Path, Path]) -> None:
    src, tgt = xlsx_pair
    config = Config(source_file=str(src), target_file=str(tgt))
    df_src, df_tgt = load_source_target(config)
    assert "nom" in df_src.columns
    assert "name" in df_tgt.columns


def test_load_source_target_single_file(tmp_path: Path) -> None:
    path = tmp_path / "classeur.xlsx"
    with pd.ExcelWriter(path, engine="openpyxl") as w:
        pd.DataFrame({"a": ["x"]}).to_excel(w, sheet_name="Source", index=False)
        pd.DataFrame({"b": ["y"]}).to_excel(w, sheet_name="Cible", index=False)
    config = Config(single_file=str(path), source_sheet_in_single="Source", target_sheet_in_single="Cible")
    df_src, df_tgt = load_source_target(config)
    assert list_columns(df_src) == ["a"]
    assert list_columns(df_tgt) == ["b"]
