"""Bundled pricing snapshot."""
