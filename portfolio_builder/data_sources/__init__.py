"""Data source modules."""

from .universe import load_universe, parse_universe
