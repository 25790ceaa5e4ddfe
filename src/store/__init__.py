"""Storage and versioning layer.

This module persists dataset CSV files and the version-history document.
It decides when a fetched table becomes a new dataset version.
"""
