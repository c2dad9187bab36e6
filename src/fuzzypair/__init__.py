"""FuzzyPair - Appariement approximatif entre deux colonnes de tableurs."""

from fuzzypair.config import ConfigError, ConfigFileError, FuzzyPairError, InvalidInputError
from fuzzypair.io_excel import ExcelFileError

__all__ = [
    "__version__",
    "FuzzyPairError",
    "ConfigError",
    "ConfigFileError",
    "ExcelFileError",
    "InvalidInputError",
]

__version__ = "0.1.0"
