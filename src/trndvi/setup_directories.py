"""
Directory setup for the NDVI reporting pipeline.

Flat layout under one base directory:
- tables/ : CSV report tables and the run tracker database
- plots/  : figures
- logs/   : pipeline log files
"""

from pathlib import Path


def setup_output_directories(base_output_dir):
    """
    Set up the output directory structure.

    Parameters
    ----------
    base_output_dir : str or Path
        Base output directory (``~`` is expanded).

    Returns
    -------
    dict
        Dictionary with paths: 'base', 'tables', 'plots', 'logs'
    """
    base_output_dir = Path(base_output_dir).expanduser().resolve()

    directories = {
        "base": base_output_dir,
        "tables": base_output_dir / "tables",
        "plots": base_output_dir / "plots",
        "logs": base_output_dir / "logs",
    }

    for path in directories.values():
        path.mkdir(parents=True, exist_ok=True)

    print("\nOutput directories created:")
    for key, path in directories.items():
        print(f"  {key:12s}: {path}")
    print("=" * 70 + "\n")

    return directories
