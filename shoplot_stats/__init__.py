"""Shop-lot transaction statistics: spreadsheet ingestion and price summaries."""

__version__ = "0.1.0"
