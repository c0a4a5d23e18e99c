"""Shared infrastructure for Shortcut Gate components."""
