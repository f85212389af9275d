"""Conversion of dynamically typed input into each family's target type."""
