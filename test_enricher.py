"""Tests for reading product pages and resolving variations."""

from decimal import Decimal

import pytest
from bs4 import BeautifulSoup

from iluriaexport import enricher as enricher_module
from iluriaexport.enricher import (
    ProductPageEnricher,
    extract_categories,
    extract_description,
    extract_pictures,
    extract_variations,
)
from iluriaexport.errors import NetworkError, ParseError, SelectorError, VariationLookupError
from iluriaexport.product_data import Product
from iluriaexport.selectors import Selector

BASE_URL = "http://loja.test"


def soup(html):
    return BeautifulSoup(html, "lxml")


def product(product_id="42"):
    return Product(
        id=product_id,
        name="Shirt",
        stock=10,
        price=Decimal("49.90"),
        price_cost=None,
        vendor_name="Acme",
    )


SIZE_AND_COLOR = """
<select id="variation1">
  <option value="0">Color</option><option value="1">Red</option><option value="2">Blue</option>
</select>
<select id="variation2">
  <option value="0">Size</option><option value="7"> M </option><option value="8">G</option>
</select>
<select id="variation3"><option value="0">Material</option></select>
<input class="variation" value1="1" value2="7" price="R$ 10,00">
<input class="variation" value1="1" value2="8" price="R$ 11,00">
<input class="variation" value1="2" value2="7" value3="" price="R$ 12,50">
"""


def test_description_keeps_inner_markup(shirt_soup):
    description = extract_description(shirt_soup)
    assert description.strip() == "<p>Camisa de <b>algodão</b></p>"


def test_description_missing():
    assert extract_description(soup("<div id='x' class='product-description'>no</div>")) == ""


def test_categories_skip_home_and_store(shirt_soup):
    assert extract_categories(shirt_soup) == ("Roupas", "Camisas")


def test_categories_with_fewer_links():
    three = soup('<div class="breadcrumb"><a>Home</a><a>Loja</a><a>Roupas</a></div>')
    assert extract_categories(three) == ("Roupas", "")
    two = soup('<div class="breadcrumb"><a>Home</a><a>Loja</a></div>')
    assert extract_categories(two) == ("", "")


def test_pictures_made_absolute_in_document_order(shirt_soup):
    assert extract_pictures(shirt_soup) == [
        "http://cdn.iluria.com/a.jpg",
        "https://cdn.iluria.com/b.jpg",
    ]


def test_single_dimension(shirt_soup):
    variations = extract_variations(shirt_soup, "42")

    assert [(v.type1, v.name1) for v in variations] == [("Color", "Red"), ("Color", "Blue")]
    assert [v.price for v in variations] == [Decimal("49.90"), Decimal("1049.90")]
    assert variations[0].picture == "http://cdn.iluria.com/red.jpg"
    assert variations[1].picture is None
    assert all(v.type2 is None and v.name2 is None for v in variations)


def test_two_dimensions_share_labels_and_omit_unused_slot():
    variations = extract_variations(soup(SIZE_AND_COLOR), "42")

    assert len(variations) == 3
    assert {(v.type1, v.type2) for v in variations} == {("Color", "Size")}
    assert [(v.name1, v.name2) for v in variations] == [("Red", "M"), ("Red", "G"), ("Blue", "M")]
    assert all(v.type3 is None and v.name3 is None for v in variations)
    assert variations[2].price == Decimal("12.50")


def test_page_without_variations():
    assert extract_variations(soup("<p>nothing</p>"), "42") == []


def test_unknown_identifier_is_an_error():
    html = SIZE_AND_COLOR + '<input class="variation" value1="3" price="R$ 1,00">'
    with pytest.raises(VariationLookupError) as excinfo:
        extract_variations(soup(html), "42")
    assert excinfo.value.identifier == "3"
    assert excinfo.value.slot == 1
    assert excinfo.value.product_id == "42"


def test_missing_dimension_label_is_an_error():
    html = '<select id="variation1"><option value="1">Red</option></select>' \
           '<input class="variation" value1="1" price="R$ 1,00">'
    with pytest.raises(VariationLookupError):
        extract_variations(soup(html), "42")


def test_malformed_price():
    html = '<select id="variation1"><option value="0">Color</option><option value="1">Red</option></select>' \
           '<input class="variation" value1="1" price="R$ a combinar">'
    with pytest.raises(ParseError, match="product 42"):
        extract_variations(soup(html), "42")


def test_invalid_selector_is_a_selector_error(shirt_soup):
    with pytest.raises(SelectorError):
        Selector("div[").select_all(shirt_soup)


def test_enrich_products_fetches_each_page(shirt_page, fake_session, recording_progress):
    session = fake_session({f"{BASE_URL}/pd-42": shirt_page, f"{BASE_URL}/pd-43": "<html></html>"})
    products = [product("42"), product("43")]

    ProductPageEnricher(BASE_URL + "/", progress=recording_progress, session=session).enrich_products(products)

    assert [call["url"] for call in session.calls] == [f"{BASE_URL}/pd-42", f"{BASE_URL}/pd-43"]
    assert session.calls[0]["headers"]["User-Agent"]
    assert recording_progress.advanced == 2
    assert products[0].category == "Roupas"
    assert len(products[0].variations) == 2
    assert products[1].description == ""
    assert products[1].variations == []
    assert not session.closed


def test_non_success_status_aborts(shirt_page, fake_session):
    session = fake_session({f"{BASE_URL}/pd-42": shirt_page})
    products = [product("42"), product("404"), product("43")]

    with pytest.raises(NetworkError) as excinfo:
        ProductPageEnricher(BASE_URL, session=session).enrich_products(products)

    assert excinfo.value.status_code == 404
    assert excinfo.value.product_id == "404"
    assert len(session.calls) == 2


def test_transport_error(fake_session, connection_error):
    session = fake_session(error=connection_error)
    with pytest.raises(NetworkError) as excinfo:
        ProductPageEnricher(BASE_URL, session=session).enrich_products([product()])
    assert excinfo.value.url == f"{BASE_URL}/pd-42"
    assert excinfo.value.status_code is None


def test_simulate_skips_requests(monkeypatch, fake_session, recording_progress):
    sleeps = []
    monkeypatch.setattr(enricher_module.time, "sleep", sleeps.append)
    session = fake_session()
    products = [product("1"), product("2")]

    ProductPageEnricher(BASE_URL, simulate=True, progress=recording_progress, session=session).enrich_products(products)

    assert session.calls == []
    assert sleeps == [0.3, 0.3]
    assert recording_progress.advanced == 2
    assert products[0].variations == []


def test_labels_shared_when_a_variation_skips_a_dimension():
    html = """
    <select id="variation1"><option value="0">Color</option><option value="1">Red</option><option value="2">Blue</option></select>
    <select id="variation2"><option value="0">Size</option><option value="7">M</option></select>
    <input class="variation" value1="1" value2="7" price="R$ 10,00">
    <input class="variation" value1="2" price="R$ 10,00">
    """
    variations = extract_variations(soup(html), "42")

    assert len({(v.type1, v.type2, v.type3) for v in variations}) == 1
    assert variations[1].type2 == "Size"
    assert [v.name2 for v in variations] == ["M", None]


def test_product_link_at_end_of_breadcrumb_is_not_a_subcategory():
    five = soup(
        '<div class="breadcrumb"><a>Home</a><a>Loja</a><a>Roupas</a><a>Camisas</a><a>Camisa Azul</a></div>'
    )
    assert extract_categories(five) == ("Roupas", "")
