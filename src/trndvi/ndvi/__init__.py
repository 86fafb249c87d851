"""NDVI table processing modules.

- loader: Read grid and wide per-variable tables from a geeLite store
- reshaper: Wide table -> long-format observations
- aggregator: Per-period summary statistics
- change_analyzer: Baseline/latest change and trend classification
- models: Records passed between stages
"""

from trndvi.ndvi.loader import NdviDataLoader, LoadedStore
from trndvi.ndvi.reshaper import WideTableReshaper
from trndvi.ndvi.aggregator import PeriodAggregator
from trndvi.ndvi.change_analyzer import ChangeAnalyzer
from trndvi.ndvi.models import Observation, PeriodSummary, TrendAssessment

__all__ = [
    "NdviDataLoader",
    "LoadedStore",
    "WideTableReshaper",
    "PeriodAggregator",
    "ChangeAnalyzer",
    "Observation",
    "PeriodSummary",
    "TrendAssessment",
]
