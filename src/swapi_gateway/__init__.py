"""Filtering, re-paginating gateway over SWAPI with in-character chat."""

__version__ = "0.1.0"
