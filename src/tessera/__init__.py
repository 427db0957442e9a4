"""Tessera: Jinja2 templates for hierarchical component libraries."""

__version__ = "0.1.0"
