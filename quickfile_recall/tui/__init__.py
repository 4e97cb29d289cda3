"""Textual picker used by the terminal host."""
