"""Crée des fichiers Excel et une config de démonstration pour FuzzyPair."""

import json
from pathlib import Path

import pandas as pd

DATA_DIR = Path(__file__).parent / "data"
DATA_DIR.mkdir(exist_ok=True)

source = pd.DataFrame({
    "nom": ["John Smith", "Microsoft Corp", "Société Générale", "", "Apple Inc", "Hélène Dubois"],
    "ville": ["Londres", "Redmond", "Paris", "Lyon", "Cupertino", "Nîmes"],
})

target = pd.DataFrame({
    "name": ["J. Smith", "Microsoft Corporation", "Societe Generale SA", "Helene Dubois", "Banana Co"],
    "code": ["A1", "B2", "C3", "D4", "E5"],
})

config = {
    "source_file": "source.xlsx",
    "target_file": "target.xlsx",
    "source_column": "nom",
    "target_column": "name",
    "additional_source_columns": ["ville"],
    "additional_target_columns": ["code"],
    "algorithm": "jaro-winkler",
    "threshold": 0.7,
}

source.to_excel(DATA_DIR / "source.xlsx", index=False, engine="openpyxl")
target.to_excel(DATA_DIR / "target.xlsx", index=False, engine="openpyxl")
(DATA_DIR / "config.json").write_text(json.dumps(config, indent=2, ensure_ascii=False), encoding="utf-8")
print(f"Fichiers créés dans {DATA_DIR}")
print(f"Essai : fuzzypair run --config {DATA_DIR / 'config.json'} --output {DATA_DIR / 'resultats.xlsx'}")
