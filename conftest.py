"""Shared test fixtures for iluriaexport tests."""

import pytest
import requests
from bs4 import BeautifulSoup

HEADER = "Produto;Nome;Estoque;Preço;Preço de custo;Nome do fornecedor"

SHIRT_PAGE = """
<html><body>
<ul class="breadcrumb">
  <li><a href="/">Home</a></li>
  <li><a href="/loja">Loja</a></li>
  <li><a href="/roupas">Roupas</a></li>
  <li><a href="/roupas/camisas">Camisas</a></li>
</ul>
<div id="tab-description" class="product-description">tab copy</div>
<div class="product-description">
  <p>Camisa de <b>algodão</b></p>
</div>
<div id="thumbsContainer">
  <img src="/thumb-a.jpg" mainpictureurl="//cdn.iluria.com/a.jpg">
  <img src="/thumb-x.jpg">
  <img src="/thumb-b.jpg" mainpictureurl="https://cdn.iluria.com/b.jpg">
</div>
<select id="variation1">
  <option value="0">Color</option>
  <option value="11">Red</option>
  <option value="12">Blue</option>
</select>
<input class="variation" type="hidden" value1="11" value2="" value3="" price="R$ 49,90" largepictureurl="//cdn.iluria.com/red.jpg">
<input class="variation" type="hidden" value1="12" price="R$ 1.049,90">
</body></html>
"""


class FakeResponse:
    def __init__(self, status_code=200, text=""):
        self.status_code = status_code
        self.text = text


class FakeSession:
    """Stands in for requests.Session, answering from a url -> page map."""

    def __init__(self, pages=None, error=None):
        self.pages = pages or {}
        self.error = error
        self.calls = []
        self.closed = False

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        if url not in self.pages:
            return FakeResponse(404, "not found")
        page = self.pages[url]
        if isinstance(page, FakeResponse):
            return page
        return FakeResponse(200, page)

    def close(self):
        self.closed = True


class RecordingProgress:
    def __init__(self):
        self.advanced = 0

    def advance(self, amount=1):
        self.advanced += amount


@pytest.fixture
def shirt_page():
    return SHIRT_PAGE


@pytest.fixture
def shirt_soup():
    return BeautifulSoup(SHIRT_PAGE, "lxml")


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def connection_error():
    return requests.ConnectionError("connection refused")


@pytest.fixture
def recording_progress():
    return RecordingProgress()


@pytest.fixture
def write_export(tmp_path):
    """Write lines as a Windows-1252 export file and return its path."""

    def _write(*lines, header=HEADER, name="produtos.csv"):
        path = tmp_path / name
        path.write_bytes("\r\n".join((header,) + lines).encode("cp1252") + b"\r\n")
        return str(path)

    return _write
