import logging
from collections.abc import Iterable

import dataframely as dy
import polars as pl

from carescape.constants import COLOR_TYPE_DATA_TYPE, COLOR_TYPE_VALUES
from carescape.markers import (
    Record,
    record_color_type,
    record_id,
    record_location,
    record_materials,
)

logger = logging.getLogger(__name__)


class ColorRecordSchema(dy.Schema):
    """Searchable fields of the color catalogue, one row per record.

    Row order follows the order in which the catalogue returned the records,
    which is also the order story mode walks through them.
    """

    id = dy.String(nullable=False, primary_key=True)
    name = dy.String(nullable=False)
    hex = dy.String(nullable=True)
    materials = dy.List(dy.String(nullable=False), nullable=False)
    location = dy.String(nullable=True)
    color_type = dy.Enum(COLOR_TYPE_VALUES, nullable=True)

    @classmethod
    def build(cls, records: Iterable[Record]) -> dy.DataFrame["ColorRecordSchema"]:
        """
        Build a validated catalogue frame from raw records.

        Records without an id are skipped. When an id appears more than once
        the first record wins.

        Args:
            records: Raw records as returned by the catalogue API

        Returns:
            A validated DataFrame conforming to ColorRecordSchema
        """
        rows = []
        for record in records:
            marker_id = record_id(record)
            if marker_id is None:
                logger.warning(f"Skipping color record without an id: {record!r}")
                continue
            hex_value = record.get("hex", record.get("hexCode"))
            rows.append(
                {
                    "id": marker_id,
                    "name": str(record.get("name") or ""),
                    "hex": hex_value if isinstance(hex_value, str) else None,
                    "materials": record_materials(record),
                    "location": record_location(record),
                    "color_type": record_color_type(record),
                }
            )

        df = pl.DataFrame(
            rows,
            schema={
                "id": pl.String(),
                "name": pl.String(),
                "hex": pl.String(),
                "materials": pl.List(pl.String()),
                "location": pl.String(),
                "color_type": pl.String(),
            },
        ).with_columns(pl.col("color_type").cast(COLOR_TYPE_DATA_TYPE))

        deduplicated = df.unique(subset="id", keep="first", maintain_order=True)
        if deduplicated.height != df.height:
            logger.warning(
                f"Dropped {df.height - deduplicated.height} color records with duplicate ids"
            )

        return cls.validate(deduplicated)


def ordered_ids(color_record_dataframe: dy.DataFrame[ColorRecordSchema]) -> list[str]:
    return color_record_dataframe["id"].to_list()
