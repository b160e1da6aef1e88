#!/usr/bin/env python3
"""
Product page enricher

Fetches the storefront page of every product (`{base_url}/pd-{id}`) and
fills in what the admin export does not carry:

1. Description (inner HTML of the description block)
2. Category and subcategory from the breadcrumb
3. Picture URLs from the thumbnail strip
4. Variations, with the label and name of each dimension resolved from the
   page's dimension selectors

Requests are sequential and the first failure aborts the run.
"""

import logging
import os
import re
import time
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

import requests
from bs4 import BeautifulSoup

from iluriaexport import selectors
from iluriaexport.errors import NetworkError, ParseError, VariationLookupError
from iluriaexport.importer import parse_decimal
from iluriaexport.product_data import Product, Variation
from iluriaexport.progress import ProgressReporter

DEFAULT_USER_AGENT = "Mozilla/5.0"
SIMULATED_REQUEST_DELAY = 0.3  # seconds
SLOTS = (1, 2, 3)

CURRENCY_PREFIX = re.compile(r"^\s*R\$\s*")


def absolute_url(url: str) -> str:
    """Protocol relative URLs (`//cdn...`) are served over plain http."""
    if url.startswith("/"):
        return f"http:{url}"
    return url


def parse_price(text: Optional[str], product_id: str) -> Decimal:
    if text is None:
        raise ParseError(f"Variation of product {product_id} has no price", field="price")
    try:
        return parse_decimal(CURRENCY_PREFIX.sub("", text).replace("\xa0", " ").strip())
    except ParseError:
        raise ParseError(
            f"Variation of product {product_id} has an invalid price '{text}'",
            field="price",
            value=text,
        )


def extract_description(soup: BeautifulSoup) -> str:
    return selectors.DESCRIPTION.inner_html(soup)


def extract_categories(soup: BeautifulSoup) -> Tuple[str, str]:
    # The first two links are the home page and the store root
    links = selectors.BREADCRUMB_LINKS.texts(soup)[2:]
    category = links[0] if len(links) > 0 else ""
    # A third link is the product itself, not a subcategory
    subcategory = links[1] if len(links) == 2 else ""
    return category, subcategory


def extract_pictures(soup: BeautifulSoup) -> List[str]:
    return [absolute_url(url) for url in selectors.THUMBNAILS.attribute(soup, "mainpictureurl")]


def _scan_variation_inputs(soup: BeautifulSoup, product_id: str):
    scanned = []
    for control in selectors.VARIATION_INPUTS.select_all(soup):
        values = tuple((control.get(f"value{slot}") or "").strip() for slot in SLOTS)
        price = parse_price(control.get("price"), product_id)
        picture = (control.get("largepictureurl") or "").strip()
        scanned.append((values, price, absolute_url(picture) if picture else None))
    return scanned


def _resolve_dimension(
    soup: BeautifulSoup, slot: int, identifiers: Sequence[str], product_id: str
) -> Tuple[str, Dict[str, str]]:
    dimension = selectors.DIMENSIONS[slot]
    label = dimension.option_text(soup, selectors.LABEL_OPTION_VALUE)
    if label is None:
        raise VariationLookupError(
            f"Product {product_id} has no label for variation dimension {slot}",
            product_id=product_id,
            slot=slot,
        )
    names = {}
    for identifier in identifiers:
        name = dimension.option_text(soup, identifier)
        if name is None:
            raise VariationLookupError(
                f"Product {product_id} has no option '{identifier}' for variation dimension {slot}",
                product_id=product_id,
                slot=slot,
                identifier=identifier,
            )
        names[identifier] = name
    return label, names


def extract_variations(soup: BeautifulSoup, product_id: str) -> List[Variation]:
    """
    Build the product's variations from the page's variation inputs.

    Every input carries up to three value ids (`value1`..`value3`). The ids
    seen in each dimension are looked up once in that dimension's <select>:
    the option with value "0" gives the label shared by all variations, the
    option with the id's value gives its name. Every variation carries the
    label of each dimension in use; a variation without a value there gets no
    name for it. Dimensions that no input uses are left out entirely.
    """
    scanned = _scan_variation_inputs(soup, product_id)

    observed: Dict[int, List[str]] = {slot: [] for slot in SLOTS}
    for values, _, _ in scanned:
        for slot, identifier in zip(SLOTS, values):
            if identifier and identifier not in observed[slot]:
                observed[slot].append(identifier)

    if not observed[1]:
        if scanned:
            logging.debug(f"Product {product_id} has variation inputs without a first dimension")
        return []

    resolved = {
        slot: _resolve_dimension(soup, slot, identifiers, product_id)
        for slot, identifiers in observed.items()
        if identifiers
    }

    variations = []
    for values, price, picture in scanned:
        if not values[0]:
            raise VariationLookupError(
                f"Product {product_id} has a variation without a value for dimension 1",
                product_id=product_id,
                slot=1,
            )
        dimensions = {}
        for slot, identifier in zip(SLOTS, values):
            if slot in resolved:
                label, names = resolved[slot]
                dimensions[f"type{slot}"] = label
                dimensions[f"name{slot}"] = names.get(identifier)
        variations.append(Variation(price=price, picture=picture, **dimensions))
    return variations


class ProductPageEnricher:
    """Sequential fetch-and-parse of product pages, mutating products in place"""

    def __init__(
        self,
        base_url: str,
        simulate: bool = False,
        progress: Optional[ProgressReporter] = None,
        session: Optional[requests.Session] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.simulate = simulate
        self.progress = progress
        self.owns_session = session is None
        self.session = session or requests.Session()
        self.user_agent = user_agent or os.getenv("ILURIA_USER_AGENT", DEFAULT_USER_AGENT)
        self.timeout = timeout

    def build_product_url(self, product_id: str) -> str:
        return f"{self.base_url}/pd-{product_id}"

    def fetch_page(self, product: Product) -> str:
        url = self.build_product_url(product.id)
        logging.debug(f"Making web request at: {url}")
        try:
            response = self.session.get(
                url, headers={"User-Agent": self.user_agent}, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise NetworkError(
                f"Could not get at {url}. Details: {e}", url=url, product_id=product.id
            )
        if not 200 <= response.status_code < 300:
            raise NetworkError(
                f"Request for product {product.id} failed with status code {response.status_code}",
                url=url,
                product_id=product.id,
                status_code=response.status_code,
            )
        return response.text

    def enrich_product(self, product: Product, soup: BeautifulSoup) -> Product:
        """Fill the product from an already parsed page."""
        product.description = extract_description(soup)
        product.category, product.subcategory = extract_categories(soup)
        product.pictures = extract_pictures(soup)
        product.variations = extract_variations(soup, product.id)
        logging.debug(f"Enriched product: {product}")
        return product

    def enrich_products(self, products: List[Product]) -> List[Product]:
        for product in products:
            if self.progress is not None:
                self.progress.advance(1)
            if self.simulate:
                logging.debug(f"Simulating web request at: {self.build_product_url(product.id)}")
                time.sleep(SIMULATED_REQUEST_DELAY)
                continue
            body = self.fetch_page(product)
            self.enrich_product(product, BeautifulSoup(body, "lxml"))
        logging.info(f"✅ Enriched {len(products)} products")
        return products

    def close(self):
        if self.owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

