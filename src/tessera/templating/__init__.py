r"""Tessera templating.

Jinja2 integration for hierarchical component libraries: template references
are resolved to library views by handle or path, compiled templates are
cached per adapter and evicted on library changes, and every component
template renders with a ``_self`` describing that component.

Basic usage:
    from tessera.config import AdapterConfig
    from tessera.library import ComponentCollection
    from tessera.templating import RenderMeta, register

    library = ComponentCollection.from_directory(Path("components"))
    adapter = register(library, AdapterConfig(import_context=True))

    view = library.get_view("organisms/menu/menu.j2")
    html = await adapter.render(view.path, view.content, {"title": "Menu"})

Template references:
    {% include "@button" %}                     {# handle #}
    {% include "/atoms/button/button.j2" %}     {# rooted, depth independent #}
    {% include "atoms/button/button.j2" %}      {# relative to the library root #}
"""

from ._adapter import JinjaAdapter, RenderMeta, register
from ._context import ContextPatcher, defaults_deep, is_public_key, set_keys
from ._environment import create_environment
from ._invalidation import INVALIDATING_EVENTS, CacheInvalidator
from ._loader import ComponentLoader
from ._paths import (
    ROOT_MARKER,
    is_handle,
    is_rooted,
    relative_key,
    resolve_relative_path,
    resolve_rooted_path,
)
from ._registry import TemplateRegistry
from ._template import ComponentTemplate, bind_template_class

__all__ = [
    "INVALIDATING_EVENTS",
    "ROOT_MARKER",
    "CacheInvalidator",
    "ComponentLoader",
    "ComponentTemplate",
    "ContextPatcher",
    "JinjaAdapter",
    "RenderMeta",
    "TemplateRegistry",
    "bind_template_class",
    "create_environment",
    "defaults_deep",
    "is_handle",
    "is_public_key",
    "is_rooted",
    "register",
    "relative_key",
    "resolve_relative_path",
    "resolve_rooted_path",
    "set_keys",
]
