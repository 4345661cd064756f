import logging
from typing import NamedTuple, Optional

import dataframely as dy
import polars as pl

from carescape.dataframes.color_record import ColorRecordSchema

logger = logging.getLogger(__name__)


class ColorFilter(NamedTuple):
    """Search values entered in the map's filter panel.

    Text values match case-insensitively anywhere in the field. Blank values
    impose no constraint. ``color_types`` restricts records to the given types
    when set; records without a type are then excluded.
    """

    name: str = ""
    material: str = ""
    location: str = ""
    color_types: Optional[frozenset[str]] = None

    def is_empty(self) -> bool:
        return (
            not _needle(self.name)
            and not _needle(self.material)
            and not _needle(self.location)
            and self.color_types is None
        )


NO_FILTER = ColorFilter()


def _needle(value: str) -> str:
    return value.strip().lower()


def _contains(column: pl.Expr, value: str) -> pl.Expr:
    return column.str.to_lowercase().str.contains(_needle(value), literal=True)


def build_predicates(color_filter: ColorFilter) -> list[pl.Expr]:
    predicates: list[pl.Expr] = []
    if _needle(color_filter.name):
        predicates.append(_contains(pl.col("name"), color_filter.name))
    if _needle(color_filter.material):
        predicates.append(
            pl.col("materials")
            .list.eval(
                pl.element()
                .str.to_lowercase()
                .str.contains(_needle(color_filter.material), literal=True)
            )
            .list.any()
        )
    if _needle(color_filter.location):
        predicates.append(_contains(pl.col("location"), color_filter.location))
    if color_filter.color_types is not None:
        predicates.append(
            pl.col("color_type")
            .cast(pl.String)
            .is_in(pl.Series(sorted(color_filter.color_types), dtype=pl.String))
        )
    return predicates


def filter_records(
    color_record_dataframe: dy.DataFrame[ColorRecordSchema],
    color_filter: ColorFilter,
) -> dy.DataFrame[ColorRecordSchema]:
    """
    Apply the filter panel's predicates to the catalogue, keeping row order.

    Args:
        color_record_dataframe: The full catalogue
        color_filter: The active filter values

    Returns:
        The rows matching every predicate
    """
    predicates = build_predicates(color_filter)
    if not predicates:
        return color_record_dataframe

    filtered = color_record_dataframe.filter(*predicates)
    logger.debug(
        f"Filter kept {filtered.height} of {color_record_dataframe.height} color records"
    )
    return ColorRecordSchema.validate(filtered)
