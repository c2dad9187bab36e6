"""Modèles Qt pour FuzzyPair GUI."""

from fuzzypair_gui.models.dataframe_model import DataFrameModel

__all__ = ["DataFrameModel"]
