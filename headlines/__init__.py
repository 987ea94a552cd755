"""Headlines -- ingest news listings from a page and annotate saved articles."""

__version__ = "0.1.0"
