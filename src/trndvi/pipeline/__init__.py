"""Pipeline orchestration, report writing and run tracking."""

from trndvi.pipeline.orchestrator import PipelineOrchestrator, PipelineResult
from trndvi.pipeline.run_tracker import RunTracker
from trndvi.pipeline.report import ReportWriter

__all__ = ['PipelineOrchestrator', 'PipelineResult', 'RunTracker', 'ReportWriter']
