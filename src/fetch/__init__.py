"""Remote data fetching.

This module retrieves the project manifest and per-dataset sheet tables.
Failures normalize to typed result values at this boundary.
"""
