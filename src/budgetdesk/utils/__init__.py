"""Parsing helpers for command-line input."""
