"""
Reads the product/variation export downloaded from the Iluria admin.

The file is a `;` delimited table saved as Windows-1252, with numbers in
the Brazilian `1.234,56` format.
"""

import csv
import io
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from iluriaexport.errors import DecodeError, InputOutputError, ParseError
from iluriaexport.product_data import RawRow

LEGACY_ENCODING = "cp1252"
DELIMITER = ";"

# Header name -> RawRow attribute
REQUIRED_COLUMNS = {
    "Produto": "product_id",
    "Nome": "name",
    "Estoque": "stock",
    "Preço": "price",
    "Preço de custo": "price_cost",
    "Nome do fornecedor": "vendor_name",
}
VARIATION_COLUMNS = {
    "Variação 1": "variation1",
    "Variação 2": "variation2",
    "Variação 3": "variation3",
}


def parse_decimal(text: str) -> Decimal:
    """Convert `1.234,56` into Decimal('1234.56'). Raises ParseError."""
    literal = text.strip().replace(".", "").replace(",", ".")
    try:
        number = Decimal(literal)
    except InvalidOperation:
        raise ParseError(f"'{text}' is not a valid number", value=text)
    if not number.is_finite():
        raise ParseError(f"'{text}' is not a valid number", value=text)
    return number


def parse_optional_decimal(text: Optional[str]) -> Optional[Decimal]:
    if text is None or not text.strip():
        return None
    return parse_decimal(text)


def parse_optional_int(text: Optional[str]) -> Optional[int]:
    if text is None or not text.strip():
        return None
    literal = text.strip().replace(".", "")
    try:
        return int(literal)
    except ValueError:
        raise ParseError(f"'{text}' is not a valid integer", value=text)


def decode_file(path: str) -> str:
    try:
        with open(path, "rb") as f:
            content = f.read()
    except OSError as e:
        raise InputOutputError(f"Error when opening file '{path}': {e}", path=path)
    try:
        return content.decode(LEGACY_ENCODING)
    except UnicodeDecodeError as e:
        raise DecodeError(f"Could not read text file '{path}': {e}", path=path)


def _parse_row(record: Dict[str, Optional[str]], variation_columns: Dict[str, str]) -> RawRow:
    values = {}
    for column, attribute in REQUIRED_COLUMNS.items():
        value = record.get(column)
        if value is None:
            raise ParseError(f"missing value for column '{column}'", field=column)
        try:
            if attribute == "price":
                values[attribute] = parse_decimal(value)
            elif attribute == "price_cost":
                values[attribute] = parse_optional_decimal(value)
            elif attribute == "stock":
                values[attribute] = parse_optional_int(value)
            else:
                values[attribute] = value
        except ParseError as e:
            e.field = column
            raise
    for column, attribute in variation_columns.items():
        values[attribute] = record.get(column) or ""
    return RawRow(**values)


def parse_rows(text: str, path: str = "<memory>") -> List[RawRow]:
    """Parse already decoded table text. The whole import fails on the first bad row."""
    reader = csv.DictReader(io.StringIO(text, newline=""), delimiter=DELIMITER)
    header = [name.strip() for name in (reader.fieldnames or [])]
    reader.fieldnames = header
    missing = [column for column in REQUIRED_COLUMNS if column not in header]
    if missing:
        raise ParseError(
            f"File '{path}' is missing required columns: {', '.join(missing)}",
            path=path,
        )
    variation_columns = {c: a for c, a in VARIATION_COLUMNS.items() if c in header}

    rows = []
    for row_number, record in enumerate(reader, start=1):
        if None in record:
            raise ParseError(
                f"Could not map row {row_number} of '{path}': more fields than header columns",
                path=path,
                row=row_number,
            )
        try:
            rows.append(_parse_row(record, variation_columns))
        except ParseError as e:
            raise ParseError(
                f"Could not map row {row_number} of '{path}' (column '{e.field}'): {e.message}",
                path=path,
                row=row_number,
                field=e.field,
                value=e.value,
            )
    return rows


def read_raw_rows(path: str) -> List[RawRow]:
    """Read every product/variation row of the export file."""
    rows = parse_rows(decode_file(path), path)
    logging.info(f"📄 Read {len(rows)} rows from {path}")
    if logging.getLogger().isEnabledFor(logging.DEBUG):
        logging.debug("Products read from csv file:")
        for row in rows:
            logging.debug(f"  {row}")
    return rows
