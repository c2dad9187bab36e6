"""Écrans de l'application FuzzyPair GUI."""

from fuzzypair_gui.screens.project_screen import ProjectScreen
from fuzzypair_gui.screens.results_screen import ResultsScreen

__all__ = ["ProjectScreen", "ResultsScreen"]
