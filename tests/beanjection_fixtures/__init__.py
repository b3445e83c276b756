"""Packages scanned by the component scan tests."""
