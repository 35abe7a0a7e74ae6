"""monthgrid - Month-grid calendar layout and drag interaction engine."""

__version__ = "0.1.0"
