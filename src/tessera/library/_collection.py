# pyright: reportAny=false, reportExplicitAny=false
"""In-memory component collection.

ComponentCollection implements ComponentLibrary. It can be populated
programmatically or scanned from a directory of component templates with
optional YAML configuration files next to them:

    components/
        atoms/button/button.j2
        atoms/button/button.config.yaml
        molecules/card/card.j2
"""

import os
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from tessera.exceptions import ConfigLoadError

from ._events import EventEmitter, LibraryEvent
from ._models import ENTITY_MARKER, VARIANT_SEPARATOR, Component, Variant, View

if TYPE_CHECKING:
    from collections.abc import Mapping

CONFIG_SUFFIXES = (".config.yaml", ".config.yml")


def _normalize(path: Path) -> Path:
    return Path(os.path.normpath(path))


def read_component_config(template: Path, name: str) -> dict[str, Any]:
    """Read the YAML configuration file for a component template.

    Looks for ``<name>.config.yaml`` then ``<name>.config.yml`` beside the
    template.

    Args:
        template: Path to the component template.
        name: Component name.

    Returns:
        The parsed mapping, or an empty dict if there is no config file.

    Raises:
        ConfigLoadError: If the file is not valid YAML or not a mapping.
    """
    for suffix in CONFIG_SUFFIXES:
        config_path = template.parent / f"{name}{suffix}"
        if not config_path.is_file():
            continue
        try:
            data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            mark = getattr(e, "problem_mark", None)
            raise ConfigLoadError(
                f"Failed to parse component config: {e}",
                path=config_path,
                line=mark.line + 1 if mark is not None else None,
                column=mark.column + 1 if mark is not None else None,
            ) from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            msg = f"Component config must be a mapping, got {type(data).__name__}"
            raise ConfigLoadError(msg, path=config_path)
        return data
    return {}


class ComponentCollection:
    """Component library holding views in registration order.

    Example:
        >>> library = ComponentCollection(Path("/styleguide/components"))
        >>> view = library.add_component(
        ...     "button", "atoms/button/button.j2", "<button>{{ text }}</button>"
        ... )
        >>> view.handle
        '@button'
        >>> library.find("@button").default_variant.name
        'default'
    """

    def __init__(self, root: Path, *, handle_prefix: str = "@") -> None:
        self._root: Path = _normalize(root)
        self._handle_prefix: str = handle_prefix
        self._components: dict[str, Component] = {}
        self._views: dict[Path, View] = {}
        self._names: dict[Path, str] = {}
        self._events: EventEmitter = EventEmitter()

    @classmethod
    def from_directory(
        cls,
        root: Path,
        *,
        extension: str = ".j2",
        handle_prefix: str = "@",
    ) -> "ComponentCollection":
        """Build a collection from the templates under a directory.

        Every file ending in `extension` becomes a component named after the
        file (without the extension). Files are registered in sorted path
        order.

        Raises:
            ValueError: If two templates share a component name.
            ConfigLoadError: If a component config file is invalid.
        """
        collection = cls(root, handle_prefix=handle_prefix)
        for template in sorted(root.rglob(f"*{extension}")):
            if not template.is_file():
                continue
            name = template.name.removesuffix(extension)
            _ = collection.add_component(
                name,
                template.relative_to(root),
                template.read_text(encoding="utf-8"),
                config=read_component_config(template, name),
            )
        return collection

    @property
    def full_path(self) -> Path:
        return self._root

    @property
    def handle_prefix(self) -> str:
        return self._handle_prefix

    @property
    def views(self) -> tuple[View, ...]:
        return tuple(self._views.values())

    @property
    def components(self) -> tuple[Component, ...]:
        return tuple(self._components.values())

    @property
    def events(self) -> EventEmitter:
        return self._events

    def set_handle_prefix(self, prefix: str) -> None:
        """Change the prefix carried by every view handle."""
        self._handle_prefix = prefix
        for path, view in self._views.items():
            self._views[path] = replace(view, handle=f"{prefix}{self._names[path]}")

    def resolve_path(self, path: Path | str) -> Path:
        """Return the absolute, normalized form of a library path."""
        return _normalize(self._root / path)

    def add_component(
        self,
        name: str,
        path: Path | str,
        content: str,
        *,
        config: "Mapping[str, Any] | None" = None,
    ) -> View:
        """Register a component and its view.

        Re-adding a component at the same path replaces it and emits
        ``view:updated`` with the new view. When the replaced component had a
        different name, ``view:removed`` is emitted first with the old view.

        Args:
            name: Component name (the handle without prefix).
            path: Template path, absolute or relative to the library root.
            content: Template source.
            config: Component configuration (see ``Component.from_config``).

        Returns:
            The registered view.

        Raises:
            ValueError: If another path already holds a component of this name.
        """
        view_path = self.resolve_path(path)
        existing = self._components.get(name)
        if existing is not None and self._names.get(view_path) != name:
            msg = f"Duplicate component name {name!r} at {view_path}"
            raise ValueError(msg)

        previous = self._names.get(view_path)
        replaced = self._views.get(view_path)
        if previous is not None and previous != name:
            _ = self._components.pop(previous, None)

        component = Component.from_config(name, config or {})
        view = View(
            path=view_path,
            handle=f"{self._handle_prefix}{name}",
            content=content,
            variants=component.variants,
        )
        self._components[name] = component
        self._views[view_path] = view
        self._names[view_path] = name

        if replaced is not None:
            if previous != name:
                self._events.emit(LibraryEvent.VIEW_REMOVED, replaced)
            self._events.emit(LibraryEvent.VIEW_UPDATED, view)
        return view

    def get_view(self, path: Path | str) -> View | None:
        """Return the view registered at a path, if any."""
        return self._views.get(self.resolve_path(path))

    def find(self, identifier: str) -> Component | Variant | None:
        if not identifier.startswith(ENTITY_MARKER):
            return None
        reference = identifier.removeprefix(ENTITY_MARKER)
        name, separator, variant_name = reference.partition(VARIANT_SEPARATOR)
        component = self._components.get(name)
        if component is None or not separator:
            return component
        return component.get_variant(variant_name)

    def update_view(self, path: Path | str, content: str) -> View:
        """Replace the source of a view and emit ``view:updated``.

        Raises:
            KeyError: If no view is registered at `path`.
        """
        view_path = self.resolve_path(path)
        if view_path not in self._views:
            msg = f"No view at {view_path}"
            raise KeyError(msg)
        view = replace(self._views[view_path], content=content)
        self._views[view_path] = view
        self._events.emit(LibraryEvent.VIEW_UPDATED, view)
        return view

    def remove_view(self, path: Path | str) -> View:
        """Remove a view with its component and emit ``view:removed``.

        Raises:
            KeyError: If no view is registered at `path`.
        """
        view_path = self.resolve_path(path)
        if view_path not in self._views:
            msg = f"No view at {view_path}"
            raise KeyError(msg)
        view = self._views.pop(view_path)
        name = self._names.pop(view_path)
        _ = self._components.pop(name, None)
        self._events.emit(LibraryEvent.VIEW_REMOVED, view)
        return view

    def update_wrapper(self, path: Path | str) -> None:
        """Announce that a preview wrapper template changed."""
        self._events.emit(LibraryEvent.WRAPPER_UPDATED, str(self.resolve_path(path)))

    def remove_wrapper(self, path: Path | str) -> None:
        """Announce that a preview wrapper template was removed."""
        self._events.emit(LibraryEvent.WRAPPER_REMOVED, str(self.resolve_path(path)))

    def refresh(self, path: Path | str) -> View | None:
        """Re-read a view's template from disk.

        Emits ``view:updated`` when the file still exists and
        ``view:removed`` when it is gone.

        Returns:
            The updated view, or None if it was removed.
        """
        view_path = self.resolve_path(path)
        if view_path.is_file():
            return self.update_view(view_path, view_path.read_text(encoding="utf-8"))
        _ = self.remove_view(view_path)
        return None
