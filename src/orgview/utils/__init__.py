"""Utility helpers for orgview."""
