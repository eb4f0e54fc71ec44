"""Headless simulation runner (CLI)."""
