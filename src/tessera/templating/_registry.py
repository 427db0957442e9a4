"""Compiled template registry."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

    from jinja2 import Template


class TemplateRegistry:
    """Cache of compiled templates, keyed by handle or root-relative path.

    One registry is owned by each adapter. Compiled templates are never
    mutated once stored; invalidation only removes entries, so a render that
    already holds a template keeps using it.
    """

    def __init__(self) -> None:
        self._templates: dict[str, Template] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self) -> "Iterator[str]":
        return iter(tuple(self._templates))

    def get(self, key: str) -> "Template | None":
        """Return the compiled template stored under `key`, if any."""
        return self._templates.get(key)

    def add(self, key: str, template: "Template") -> None:
        """Store a compiled template, replacing any previous entry."""
        self._templates[key] = template

    def evict(self, key: str) -> bool:
        """Remove an entry.

        Returns:
            True if an entry was removed, False if there was none.
        """
        return self._templates.pop(key, None) is not None

    def clear(self) -> None:
        self._templates.clear()
