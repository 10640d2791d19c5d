"""Bookmark store and export transform."""
