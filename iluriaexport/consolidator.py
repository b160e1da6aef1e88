import logging
from typing import Dict, Iterable, List, Optional

from iluriaexport.product_data import Product, RawRow


def consolidate(rows: Iterable[RawRow], limit: Optional[int] = 0) -> List[Product]:
    """
    Collapse product/variation rows into one Product per product id.

    The first row seen for an id fixes the product's fields and its position.
    Later rows for the same id are ignored here, variations come from the
    product page. With a non-zero limit, at most `limit` distinct products are
    created; rows for products already accepted never count against it.
    """
    if limit is not None and limit < 0:
        raise ValueError(f"limit must be zero or positive, got {limit}")

    seen: Dict[str, Product] = {}
    products = []
    skipped_ids = set()
    for row in rows:
        if row.product_id in seen:
            continue
        if limit and len(products) >= limit:
            if row.product_id not in skipped_ids:
                skipped_ids.add(row.product_id)
                logging.debug(f"Limit of {limit} reached, skipping product {row.product_id}")
            continue
        product = Product.from_raw_row(row)
        seen[row.product_id] = product
        products.append(product)

    logging.info(f"📦 Consolidated {len(products)} unique products")
    if skipped_ids:
        logging.info(f"⏭️ Skipped {len(skipped_ids)} products over the limit of {limit}")
    return products
