"""
CSS selectors used to read Iluria product pages.

Each selector is a small descriptor compiled once with soupsieve and applied
to a parsed BeautifulSoup document, so the extraction code never builds
selector strings on the fly.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

import soupsieve
from bs4 import Tag

from iluriaexport.errors import SelectorError


@dataclass(frozen=True)
class Selector:
    expression: str
    _compiled: Any = field(default=None, init=False, repr=False, compare=False)

    @property
    def compiled(self):
        if self._compiled is None:
            try:
                compiled = soupsieve.compile(self.expression)
            except soupsieve.SelectorSyntaxError as e:
                raise SelectorError(
                    f"Invalid selector '{self.expression}': {e}", expression=self.expression
                )
            object.__setattr__(self, "_compiled", compiled)
        return self._compiled

    def select_all(self, node: Tag) -> List[Tag]:
        return self.compiled.select(node)

    def select_first(self, node: Tag) -> Optional[Tag]:
        return self.compiled.select_one(node)

    def attribute(self, node: Tag, name: str) -> List[str]:
        """Values of `name` on every match that carries it, in document order."""
        values = []
        for element in self.select_all(node):
            value = element.get(name)
            if value is not None:
                values.append(value)
        return values

    def inner_html(self, node: Tag) -> str:
        element = self.select_first(node)
        return element.decode_contents() if element is not None else ""

    def texts(self, node: Tag) -> List[str]:
        return [element.get_text() for element in self.select_all(node)]


@dataclass(frozen=True)
class DimensionSelector:
    """The <select> that names the values of one variation dimension."""

    slot: int
    options: Selector

    def option_text(self, node: Tag, value: str) -> Optional[str]:
        for option in self.options.select_all(node):
            if option.get("value") == value:
                return option.get_text().strip()
        return None


DESCRIPTION = Selector("div:not([id]).product-description")
BREADCRUMB_LINKS = Selector(".breadcrumb a")
THUMBNAILS = Selector("#thumbsContainer img")
VARIATION_INPUTS = Selector("input.variation")

DIMENSIONS = {
    slot: DimensionSelector(slot, Selector(f"select#variation{slot} option"))
    for slot in (1, 2, 3)
}

# Value of the placeholder option whose text is the dimension label
LABEL_OPTION_VALUE = "0"
