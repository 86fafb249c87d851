"""trndvi User Configuration.

This is the user-facing configuration file. Modify settings here to customize
the report. Advanced settings are in trndvi.schemas.param (ParamConfig).

Usage:
    python scripts/run_ndvi_report.py scripts/user_config.py
    python scripts/run_ndvi_report.py scripts/user_config.py --freq year
"""

CONFIG = {
    # ========================================================================
    # GEELITE STORE (as passed to geeLite's set_config)
    # ========================================================================
    "PATH": "data/tr-geelite",     # geeLite output directory
    "REGIONS": ["TR"],             # ISO country codes
    "SOURCE": {
        "MODIS/061/MOD13A2": {     # MODIS Terra 16-day 1km vegetation indices
            "NDVI": ["mean", "sd"],
        },
    },
    "START": "2020-01-01",         # Earliest date kept
    "RESOL": 3,                    # H3 hexagon resolution

    # ========================================================================
    # REPORT
    # ========================================================================
    "VARIABLE": "MODIS/061/MOD13A2/NDVI/mean",
    "FREQ": "month",               # day, week, month, quarter, year
    "BASE_DIR": "output/tr-ndvi",  # All outputs go here

    # ========================================================================
    # TREND THRESHOLDS (NDVI scaled by 1e4, as stored by MODIS)
    # ========================================================================
    "IMPROVEMENT_THRESHOLD": 50,
    "DECLINE_THRESHOLD": -50,
}
