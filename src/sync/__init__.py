"""Synchronization pipeline.

This module drives a full run from manifest to persisted version history.
"""
