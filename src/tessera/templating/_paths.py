"""Template location classification and rooted path resolution.

Jinja2 resolves every include against the library root, but component
templates are authored with paths that assume their own position in the
tree. A template at ``organisms/menu/menu.j2`` that includes
``/molecules/languages/languages.j2`` may reach the loader as
``/organisms/menu/molecules/languages/languages.j2`` once hosts prefix the
including template's directory. Rooted references are repaired by anchoring
on the last top-level category folder that appears in the location.
"""

import os
from pathlib import Path
from typing import TYPE_CHECKING

from tessera.exceptions import ResolutionError

if TYPE_CHECKING:
    from collections.abc import Sequence

ROOT_MARKER = "/"
"""Prefix marking a location as rooted at the library root."""

PATH_SEPARATOR = "/"


def is_handle(location: str | None, handle_prefix: str) -> bool:
    """Return True if the location is a handle reference."""
    return location is not None and location.startswith(handle_prefix)


def is_rooted(location: str) -> bool:
    """Return True if the location is a rooted path reference."""
    return location.startswith(ROOT_MARKER)


def normalize_path(path: Path) -> Path:
    """Collapse ``.`` and ``..`` segments without touching the filesystem."""
    return Path(os.path.normpath(path))


def resolve_rooted_path(
    location: str,
    root: Path,
    categories: "Sequence[str]",
) -> Path:
    """Resolve a rooted location to an absolute path under the library root.

    Segments are scanned from the last one toward the first; the first
    segment equal to a category name is the anchor and everything before it
    is dropped. The rightmost match wins, so any accumulated nesting prefix
    collapses regardless of how deep the including template lives.

    Args:
        location: Rooted location, e.g. ``/organisms/menu/atoms/button/button.j2``.
        root: Library root directory.
        categories: Top-level category folder names.

    Returns:
        The canonical path, e.g. ``<root>/atoms/button/button.j2``.

    Raises:
        ResolutionError: If no segment matches a category.

    Example:
        >>> resolve_rooted_path(
        ...     "/organisms/menu/molecules/languages/languages.j2",
        ...     Path("/lib"),
        ...     ("atoms", "molecules", "organisms"),
        ... )
        PosixPath('/lib/molecules/languages/languages.j2')
    """
    segments = location.split(PATH_SEPARATOR)
    known = frozenset(categories)

    for index in range(len(segments) - 1, -1, -1):
        if segments[index] in known:
            return normalize_path(root.joinpath(*segments[index:]))

    raise ResolutionError(location, categories=categories)


def resolve_relative_path(location: str, root: Path) -> Path:
    """Join an unmarked location directly onto the library root.

    The including template's own directory is never consulted; rooted
    references exist for callers that need depth-independent includes.
    """
    return normalize_path(root / location)


def relative_key(path: Path | str, root: Path) -> str:
    """Return the POSIX path of `path` relative to the library root."""
    return Path(os.path.relpath(path, root)).as_posix()
