"""Statistics engine, dashboard session and display rendering."""
