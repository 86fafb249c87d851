"""Command-line interface modules for trndvi report execution.

This package contains core execution logic, making scripts/ optional and deletable.
"""

from trndvi.cli.run_report import run_report_pipeline

__all__ = ['run_report_pipeline']
