"""Utility helpers shared across the analytics engine."""
