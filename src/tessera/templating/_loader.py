"""Jinja2 loader resolving component handles and library paths."""

from typing import TYPE_CHECKING, Any

from jinja2 import BaseLoader

from tessera.exceptions import ResolutionError, TemplateNotFoundError
from tessera.library import VARIANT_SEPARATOR

from ._paths import (
    is_handle,
    is_rooted,
    normalize_path,
    relative_key,
    resolve_relative_path,
    resolve_rooted_path,
)

if TYPE_CHECKING:
    from collections.abc import Callable, MutableMapping, Sequence

    from jinja2 import Environment, Template
    from structlog.typing import FilteringBoundLogger

    from tessera.library import ComponentLibrary, View

    from ._registry import TemplateRegistry


class ComponentLoader(BaseLoader):
    """Load component templates by handle, rooted path or relative path.

    Locations are looked up as follows:
    - ``@button`` (handle prefix): the view with that handle.
    - ``@button--primary`` (variant handle): the view of the owning
      component, provided it has that variant.
    - ``/atoms/button/button.j2`` (rooted): the view at the path returned by
      ``resolve_rooted_path``.
    - ``atoms/button/button.j2`` (relative): the view at the location joined
      directly onto the library root.

    Compiled templates are cached in the adapter's TemplateRegistry under the
    handle as written (component or variant) for handle references and under
    the root-relative path otherwise, and are named after that key.
    """

    def __init__(
        self,
        library: "ComponentLibrary",
        registry: "TemplateRegistry",
        *,
        handle_prefix: str,
        categories: "Sequence[str]",
        logger: "FilteringBoundLogger",
    ) -> None:
        self.library: ComponentLibrary = library
        self.registry: TemplateRegistry = registry
        self.handle_prefix: str = handle_prefix
        self.categories: tuple[str, ...] = tuple(categories)
        self._logger: FilteringBoundLogger = logger

    def find_view(self, location: str) -> "View":
        """Locate the view a template reference points to.

        When several views share the resolved path, the first one in library
        order wins.

        Raises:
            TemplateNotFoundError: If no view matches, including when a rooted
                location cannot be resolved.
        """
        view: View | None
        if is_handle(location, self.handle_prefix):
            view = self.find_handle(location)
        else:
            root = self.library.full_path
            try:
                target = (
                    resolve_rooted_path(location, root, self.categories)
                    if is_rooted(location)
                    else resolve_relative_path(location, root)
                )
            except ResolutionError as e:
                self._logger.warning(
                    "template_not_found", location=location, reason=str(e)
                )
                raise TemplateNotFoundError(location, cause=e) from e
            view = next(
                (v for v in self.library.views if normalize_path(v.path) == target),
                None,
            )

        if view is None:
            self._logger.warning("template_not_found", location=location)
            raise TemplateNotFoundError(location)
        return view

    def find_handle(self, handle: str) -> "View | None":
        """Return the view for a component or variant handle."""
        views = self.library.views
        view = next((v for v in views if v.handle == handle), None)
        if view is not None:
            return view

        component, separator, variant = handle.partition(VARIANT_SEPARATOR)
        if not separator:
            return None
        view = next((v for v in views if v.handle == component), None)
        if view is None or not any(v.name == variant for v in view.variants):
            return None
        return view

    def load_source(self, location: str, *, precompiled: str | None = None) -> str:
        """Return the template source for a location.

        Args:
            location: Handle, rooted or relative reference.
            precompiled: Source supplied by the caller. Returned unchanged
                without any lookup.

        Raises:
            TemplateNotFoundError: If no view matches the location.
        """
        if precompiled is not None:
            return precompiled
        return self.find_view(location).content

    def registry_key(self, location: str, view: "View") -> str:
        """Registry key for a view reached through `location`.

        Handle references keep the handle as written, so a variant handle
        compiles a template named after that variant.
        """
        if is_handle(location, self.handle_prefix):
            return location
        return relative_key(view.path, self.library.full_path)

    def get_source(
        self, environment: "Environment", template: str
    ) -> tuple[str, str | None, "Callable[[], bool] | None"]:
        view = self.find_view(template)
        return view.content, str(view.path), None

    def load(
        self,
        environment: "Environment",
        name: str,
        globals: "MutableMapping[str, Any] | None" = None,  # noqa: A002
    ) -> "Template":
        """Return the compiled template for a reference, compiling on a miss.

        On a registry hit, `globals` that differ from the cached template's
        are written into its globals, as Jinja2's own cache does.
        """
        view = self.find_view(name)
        key = self.registry_key(name, view)

        cached = self.registry.get(key)
        if cached is not None:
            if globals:
                cached.globals.update(
                    {
                        k: v
                        for k, v in globals.items()
                        if k not in cached.globals or cached.globals[k] is not v
                    }
                )
            self._logger.debug("template_cache_hit", location=name, key=key)
            return cached

        template = self.compile(
            environment,
            key,
            view.content,
            filename=str(view.path),
            globals=globals,
        )
        self.registry.add(key, template)
        self._logger.debug("template_loaded", location=name, key=key)
        return template

    def compile(
        self,
        environment: "Environment",
        name: str,
        source: str,
        *,
        filename: str | None = None,
        globals: "MutableMapping[str, Any] | None" = None,  # noqa: A002
    ) -> "Template":
        """Compile source into a template of the environment's template class.

        The result is not stored in the registry.
        """
        code = environment.compile(source, name, filename)
        return environment.template_class.from_code(
            environment,
            code,
            globals if globals is not None else environment.make_globals(None),
            None,
        )
