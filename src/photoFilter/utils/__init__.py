"""Utility helpers for photoFilter."""
