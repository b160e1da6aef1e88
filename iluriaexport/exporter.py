"""
Writes the enriched products as two tables, products and variations,
in the format the catalog import expects.
"""

import csv
import io
import logging
import sys
from dataclasses import asdict, dataclass, fields
from decimal import Decimal
from typing import Iterable, List, Optional, TextIO, Tuple

from iluriaexport.errors import InputOutputError, SerializationError
from iluriaexport.importer import DELIMITER, LEGACY_ENCODING
from iluriaexport.product_data import Product

ACTIVE = "Sim"
PICTURE_COLUMNS = 5


@dataclass
class ProductExport:
    id: str
    active: str
    name: str
    stock: Optional[int]
    price: Decimal
    price_cost: Optional[Decimal]
    vendor_name: str
    description: str
    category: str
    subcategory: str
    picture1: str
    picture2: str
    picture3: str
    picture4: str
    picture5: str


@dataclass
class VariationExport:
    id: str
    product_id: str
    type1: str
    name1: str
    type2: Optional[str]
    name2: Optional[str]
    type3: Optional[str]
    name3: Optional[str]
    price: Decimal
    picture: Optional[str]


def format_decimal(value: Decimal) -> str:
    """Decimal comma, no thousands separator, readable by the importer."""
    return format(value, "f").replace(".", ",")


def format_cell(value) -> str:
    if value is None:
        return ""
    if isinstance(value, Decimal):
        return format_decimal(value)
    return str(value)


def picture_slots(pictures: List[str]) -> List[str]:
    slots = list(pictures[:PICTURE_COLUMNS])
    return slots + [""] * (PICTURE_COLUMNS - len(slots))


def build_tables(products: Iterable[Product]) -> Tuple[List[ProductExport], List[VariationExport]]:
    """Number products from 1 and point every variation at its product's new id."""
    product_rows = []
    variation_rows = []
    for product_number, product in enumerate(products, start=1):
        export_id = str(product_number)
        product_rows.append(
            ProductExport(
                export_id,
                ACTIVE,
                product.name,
                product.stock,
                product.price,
                product.price_cost,
                product.vendor_name,
                product.description.strip(),
                product.category,
                product.subcategory,
                *picture_slots(product.pictures),
            )
        )
        for variation in product.variations:
            variation_rows.append(
                VariationExport(
                    id=str(len(variation_rows) + 1),
                    product_id=export_id,
                    type1=variation.type1,
                    name1=variation.name1,
                    type2=variation.type2,
                    name2=variation.name2,
                    type3=variation.type3,
                    name3=variation.name3,
                    price=variation.price,
                    picture=variation.picture,
                )
            )
    return product_rows, variation_rows


def render_table(rows: Iterable, export_type: type) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(
        buffer,
        fieldnames=[f.name for f in fields(export_type)],
        delimiter=DELIMITER,
        lineterminator="\r\n",
    )
    writer.writeheader()
    for row in rows:
        try:
            writer.writerow({key: format_cell(value) for key, value in asdict(row).items()})
        except (csv.Error, ValueError, TypeError) as e:
            raise SerializationError(f"Could not serialize {row}. Details: {e}", row=row)
    return buffer.getvalue()


def encode_legacy(text: str) -> bytes:
    """Characters missing from Windows-1252 become `&#NNNN;` references."""
    return text.encode(LEGACY_ENCODING, errors="xmlcharrefreplace")


def write_table(text: str, label: str, path: Optional[str], stream: Optional[TextIO] = None):
    if path is None:
        stream = stream or sys.stdout
        stream.write(f"{label}:\n{text}\n")
        return
    try:
        with open(path, "wb") as f:
            f.write(encode_legacy(text))
    except OSError as e:
        raise InputOutputError(
            f"Error when writing {label.lower()} file '{path}': {e}", path=path
        )
    logging.info(f"💾 {label} written to {path}")


def save_enriched_products(
    products: List[Product],
    products_file: Optional[str] = None,
    variations_file: Optional[str] = None,
    stream: Optional[TextIO] = None,
):
    product_rows, variation_rows = build_tables(products)
    write_table(render_table(product_rows, ProductExport), "Products", products_file, stream)
    write_table(render_table(variation_rows, VariationExport), "Variations", variations_file, stream)
    logging.info(f"📊 Exported {len(product_rows)} products and {len(variation_rows)} variations")
