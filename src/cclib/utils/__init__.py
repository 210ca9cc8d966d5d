"""Utility helpers for cclib."""
