"""Ingredient Utils - Ingredient line parsing, matching and unit conversion."""

__version__ = "0.1.0"

from . import ingredients, database, conversion, recipes, remote

__all__ = ["ingredients", "database", "conversion", "recipes", "remote"]
