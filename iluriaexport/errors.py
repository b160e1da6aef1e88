"""
Exceptions raised by the export pipeline.

Every error is fatal to a run. Each one keeps the context needed to act on
it (file path, product id, HTTP status, offending row) as attributes.
"""

from typing import Any, Optional


class IluriaExportError(Exception):
    """Base class for all export errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ConfigError(IluriaExportError):
    """Raised when the command-line configuration is invalid."""


class InputOutputError(IluriaExportError):
    """Raised when a file cannot be opened, read or written."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message)


class DecodeError(IluriaExportError):
    """Raised when the input file is not valid Windows-1252 text."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message)


class ParseError(IluriaExportError):
    """Raised for a malformed numeric literal or a malformed row."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        row: Optional[int] = None,
        field: Optional[str] = None,
        value: Optional[str] = None,
    ):
        self.path = path
        self.row = row
        self.field = field
        self.value = value
        super().__init__(message)


class NetworkError(IluriaExportError):
    """Raised when a product page cannot be fetched or answers non-2xx."""

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        product_id: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.url = url
        self.product_id = product_id
        self.status_code = status_code
        super().__init__(message)


class SelectorError(IluriaExportError):
    """Raised when a CSS selector cannot be compiled. This is a bug, not bad data."""

    def __init__(self, message: str, expression: Optional[str] = None):
        self.expression = expression
        super().__init__(message)


class VariationLookupError(IluriaExportError):
    """Raised when a variation value has no matching option on the product page."""

    def __init__(
        self,
        message: str,
        product_id: Optional[str] = None,
        slot: Optional[int] = None,
        identifier: Optional[str] = None,
    ):
        self.product_id = product_id
        self.slot = slot
        self.identifier = identifier
        super().__init__(message)


class SerializationError(IluriaExportError):
    """Raised when an export row cannot be written to the output table."""

    def __init__(self, message: str, row: Any = None):
        self.row = row
        super().__init__(message)
