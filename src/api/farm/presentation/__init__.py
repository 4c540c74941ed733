"""HTTP presentation layer for farm records."""
