#!/usr/bin/env python3
"""``trndvi`` NDVI trend report runner.

Usage:
    python scripts/run_ndvi_report.py scripts/user_config.py
    python scripts/run_ndvi_report.py scripts/user_config.py --freq year
    python scripts/run_ndvi_report.py scripts/user_config.py --variable MODIS/061/MOD13A2/NDVI/sd

Note: User config in scripts/user_config.py, expert defaults in trndvi.schemas.param
"""

import sys
import argparse
from pathlib import Path

# Add src to path
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root / "src"))

from trndvi.cli.run_report import run_report_pipeline
from trndvi.contracts import PipelineError


def main():
    parser = argparse.ArgumentParser(description="Run the trndvi NDVI trend report")
    parser.add_argument("config", help="Path to user config file")
    parser.add_argument("--store-path", help="Override geeLite store directory")
    parser.add_argument("--variable", help="Variable table, e.g. MODIS/061/MOD13A2/NDVI/mean")
    parser.add_argument("--freq", choices=["day", "week", "month", "quarter", "year"],
                        help="Reporting frequency")
    parser.add_argument("--base-dir", help="Output directory")
    parser.add_argument("--rerun", action="store_true", help="Delete output directory before running")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    cli_args = {
        "store_path": args.store_path,
        "variable": args.variable,
        "freq": args.freq,
        "base_dir": args.base_dir,
    }

    try:
        run_report_pipeline(args.config, cli_args=cli_args, rerun=args.rerun, verbose=args.verbose)
    except PipelineError as e:
        print(f"\nReport failed: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
