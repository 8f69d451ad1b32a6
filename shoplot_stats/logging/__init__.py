"""Labeled console logging and the structured upload error log."""
