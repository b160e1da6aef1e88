"""Export products and variations from an Iluria store for re-import elsewhere."""

__version__ = "0.1.0"
