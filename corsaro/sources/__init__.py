from .base import BaseProvider
from .ilcorsaronero import IlCorsaroNeroProvider
from .results_table import ResultsTableParser, TableLayout

__all__ = [
    "BaseProvider",
    "IlCorsaroNeroProvider",
    "ResultsTableParser",
    "TableLayout",
]
