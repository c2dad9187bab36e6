"""Interface graphique FuzzyPair (PySide6)."""
