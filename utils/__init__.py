"""Utility helpers for the freight quote wizard."""
