"""Fixtures partagées."""

from pathlib import Path

import pandas as pd
import pytest


@pytest.fixture
def people_source() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "nom": ["John Smith", "Microsoft Corp", "", "Apple Inc"],
            "ville": ["Paris", "Lyon", "Nice", "Lille"],
        }
    )


@pytest.fixture
def people_target() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "name": ["J. Smith", "Microsoft Corporation", "Banana Co"],
            "code": ["A1", "B2", "C3"],
        }
    )


@pytest.fixture
def xlsx_pair(tmp_path: Path, people_source: pd.DataFrame, people_target: pd.DataFrame) -> tuple[Path, Path]:
    """Deux classeurs source/cible écrits dans tmp_path."""
    src = tmp_path / "source.xlsx"
    tgt = tmp_path / "target.xlsx"
    people_source.to_excel(src, index=False, engine="openpyxl")
    people_target.to_excel(tgt, index=False, engine="openpyxl")
    return src, tgt
