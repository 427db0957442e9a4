# pyright: reportAny=false, reportExplicitAny=false
"""Render context patching.

Every component template rendered through the adapter, whether it is the
entry template or reached through ``{% include %}``, gets a context whose
``_self`` describes that component rather than the page that started the
render.
"""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from tessera.config import copy_value
from tessera.library import ENTITY_MARKER

from ._paths import is_handle, normalize_path

if TYPE_CHECKING:
    from collections.abc import Collection

    from structlog.typing import FilteringBoundLogger

    from tessera.config import AdapterConfig
    from tessera.library import ComponentLibrary, Variant

PRIVATE_PREFIX = "_"
KEYS_KEY = "_keys"


def is_public_key(key: object) -> bool:
    """Return True for string keys outside the private ``_`` namespace."""
    return isinstance(key, str) and not key.startswith(PRIVATE_PREFIX)


def set_keys(
    context: dict[str, Any], hidden: "Collection[str]" = ()
) -> dict[str, Any]:
    """Store the ordered public keys of a context under ``_keys``.

    Nested plain dicts held under public keys get their own ``_keys``.
    Private keys are never listed and their values are never visited. Only
    ``dict`` values are descended into; other mappings and objects are
    left alone.

    The index reflects the context at call time; later mutations are not
    tracked.

    Args:
        context: Context to index.
        hidden: Top-level keys left out of the index, such as environment
            globals passed down by an include.

    Returns:
        The same dict, for chaining.
    """
    public = [key for key in context if is_public_key(key) and key not in hidden]
    context[KEYS_KEY] = public
    for key in public:
        value = context[key]
        if isinstance(value, dict):
            _ = set_keys(value)
    return context


def defaults_deep(target: dict[str, Any], source: Mapping[str, Any]) -> dict[str, Any]:
    """Merge `target` over copies of the defaults in `source`.

    Values in `target` win. When both sides hold a dict under the same key,
    the dicts are merged recursively in the same way. Keys from `source`
    come first, followed by keys only present in `target`.

    Returns:
        A new dict. Values taken from `target` are not copied.
    """
    result: dict[str, Any] = {}
    for key, value in source.items():
        if key not in target:
            result[key] = copy_value(value)
        elif isinstance(target[key], dict) and isinstance(value, Mapping):
            result[key] = defaults_deep(target[key], value)
        else:
            result[key] = target[key]
    for key, value in target.items():
        if key not in result:
            result[key] = value
    return result


class ContextPatcher:
    """Adjust a render context to the component that is actually rendering.

    The rendering template is identified by its name: a handle for handle
    references, otherwise a path relative to the library root. The owning
    component is looked up in the library and, when ``import_context`` is
    enabled, its default (or explicitly requested) variant's context is
    merged under the caller's values and exposed as ``_self``.
    """

    def __init__(
        self,
        library: "ComponentLibrary",
        config: "AdapterConfig",
        logger: "FilteringBoundLogger",
    ) -> None:
        self.library: ComponentLibrary = library
        self.config: AdapterConfig = config
        self._logger: FilteringBoundLogger = logger

    @property
    def enabled(self) -> bool:
        return not self.config.pristine

    def resolve_handle(self, name: str) -> str | None:
        """Return the handle of the view behind a template name."""
        if is_handle(name, self.config.handle_prefix):
            return name
        target = normalize_path(self.library.full_path / name.lstrip("/"))
        view = next(
            (v for v in self.library.views if normalize_path(v.path) == target),
            None,
        )
        return view.handle if view is not None else None

    def resolve_entity(self, name: str) -> "Variant | None":
        """Return the variant whose context applies to a template name."""
        handle = self.resolve_handle(name)
        if handle is None:
            return None
        identifier = ENTITY_MARKER + handle.removeprefix(self.config.handle_prefix)
        entity = self.library.find(identifier)
        if entity is None:
            return None
        return entity if entity.is_variant else entity.default_variant

    def patch(
        self,
        name: str | None,
        context: Mapping[str, Any],
        *,
        hidden: "Collection[str]" = (),
    ) -> Mapping[str, Any]:
        """Return the context to render template `name` with.

        The caller's mapping is never modified. When patching does not apply
        (pristine mode, unnamed template, unknown component, context import
        disabled) the original mapping is returned as-is. Keys in `hidden` are
        kept but not listed in ``_keys``.
        """
        if not self.enabled or not name or not self.config.import_context:
            return context

        entity = self.resolve_entity(name)
        if entity is None:
            return context

        patched = defaults_deep(copy_value(dict(context)), entity.get_context())
        patched["_self"] = entity.to_json()
        _ = set_keys(patched, hidden)
        self._logger.debug("context_patched", template=name, entity=entity.handle)
        return patched
