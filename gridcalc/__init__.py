"""Integer spreadsheet engine with formulas, ranges and dependency tracking."""

__version__ = "0.1.0"

__all__ = ["cells", "formula", "spreadsheet"]