"""Spreadsheet reading, column resolution and record normalization."""
