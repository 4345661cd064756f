"""Constants for color records.

Color records describe naturally-sourced colors. Each one is prepared as a
pigment, a dye or an ink, which is what the map's type toggles filter on.
"""

import polars as pl

# Valid values for the color type of a record
COLOR_TYPE_VALUES: list[str] = [
    "pigment",
    "dye",
    "ink",
]

# Polars Enum data type for the color_type column
COLOR_TYPE_DATA_TYPE: pl.Enum = pl.Enum(COLOR_TYPE_VALUES)

# Latitude/longitude sanity bounds
LAT_MIN, LAT_MAX = -90.0, 90.0
LNG_MIN, LNG_MAX = -180.0, 180.0
