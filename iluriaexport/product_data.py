#!/usr/bin/env python3
"""
Product Data Models for the Iluria exporter

Rows read from the storefront export, the consolidated products that are
enriched from the live pages, and their variations.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional


@dataclass
class RawRow:
    """One line of the product/variation export file"""

    product_id: str
    name: str
    stock: Optional[int]
    price: Decimal
    price_cost: Optional[Decimal]
    vendor_name: str
    # Only filled in the legacy file layout
    variation1: str = ""
    variation2: str = ""
    variation3: str = ""


@dataclass
class Variation:
    """A single variation of a product, one name per dimension"""

    type1: str
    name1: str
    price: Decimal
    type2: Optional[str] = None
    name2: Optional[str] = None
    type3: Optional[str] = None
    name3: Optional[str] = None
    picture: Optional[str] = None


@dataclass
class Product:
    """A unique product, enriched in place from its storefront page"""

    id: str
    name: str
    stock: Optional[int]
    price: Decimal
    price_cost: Optional[Decimal]
    vendor_name: str
    description: str = ""
    category: str = ""
    subcategory: str = ""
    pictures: List[str] = field(default_factory=list)
    variations: List[Variation] = field(default_factory=list)

    @classmethod
    def from_raw_row(cls, row: RawRow) -> "Product":
        return cls(
            id=row.product_id,
            name=row.name,
            stock=row.stock,
            price=row.price,
            price_cost=row.price_cost,
            vendor_name=row.vendor_name,
        )
