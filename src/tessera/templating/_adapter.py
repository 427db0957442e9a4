# pyright: reportAny=false, reportExplicitAny=false
"""Template adapter tying a component library to a Jinja2 environment."""

from dataclasses import dataclass
from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING, Any, Self

from tessera.config import AdapterConfig
from tessera.exceptions import RenderError, TesseraError
from tessera.utils import create_adapter_logger

from ._context import ContextPatcher
from ._environment import create_environment
from ._invalidation import CacheInvalidator
from ._loader import ComponentLoader
from ._paths import relative_key
from ._registry import TemplateRegistry
from ._template import bind_template_class

if TYPE_CHECKING:
    from collections.abc import Mapping

    from jinja2 import Environment
    from structlog.typing import FilteringBoundLogger

    from tessera.library import ComponentLibrary


@dataclass(frozen=True, slots=True)
class RenderMeta:
    """Host-supplied information about an entry render.

    Attributes:
        component: Serialized entity being rendered (must carry ``handle``),
            exposed as ``_self``.
        target: Output destination identifier, exposed as ``_target``.
        env: Environment descriptor, exposed as ``_env``.
    """

    component: "Mapping[str, Any] | None" = None
    target: Any = None
    env: Any = None


class JinjaAdapter:
    """Render component templates from a library with Jinja2.

    The adapter owns one TemplateRegistry shared by its loader and cache
    invalidator, and one environment whose template class patches each
    render context through a ContextPatcher.

    The configured handle prefix is applied to the library on construction.

    Example:
        >>> library = ComponentCollection.from_directory(Path("components"))
        >>> with JinjaAdapter(library, AdapterConfig(import_context=True)) as adapter:
        ...     html = anyio.run(adapter.render, view.path, view.content, {})
    """

    def __init__(
        self,
        library: "ComponentLibrary",
        config: AdapterConfig | None = None,
        *,
        app_config: "Mapping[str, Any] | None" = None,
        logger: "FilteringBoundLogger | None" = None,
    ) -> None:
        self.library: ComponentLibrary = library
        self.config: AdapterConfig = config if config is not None else AdapterConfig()
        library.set_handle_prefix(self.config.handle_prefix)
        self.app_config: Mapping[str, Any] | None = app_config
        self._logger: FilteringBoundLogger = (
            logger if logger is not None else create_adapter_logger(self.config.logging)
        )

        self.registry: TemplateRegistry = TemplateRegistry()
        self.loader: ComponentLoader = ComponentLoader(
            library,
            self.registry,
            handle_prefix=self.config.handle_prefix,
            categories=self.config.categories,
            logger=self._logger,
        )
        self.patcher: ContextPatcher = ContextPatcher(
            library, self.config, self._logger
        )
        self.environment: Environment = create_environment(
            self.loader,
            self.config,
            template_class=bind_template_class(self.patcher),
        )
        self.invalidator: CacheInvalidator = CacheInvalidator(
            library, self.registry, self._logger
        )
        self.invalidator.attach()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Stop reacting to library change events."""
        self.invalidator.detach()

    def template_name(self, path: Path | str, meta: RenderMeta) -> str:
        """Name an entry template: its prefixed handle, else its library path."""
        if meta.component is not None and meta.component.get("handle"):
            return f"{self.config.handle_prefix}{meta.component['handle']}"
        return relative_key(path, self.library.full_path)

    def build_context(
        self, context: "Mapping[str, Any] | None", meta: RenderMeta
    ) -> dict[str, Any]:
        """Copy the caller's context and add reserved keys that are absent."""
        result = dict(context or {})
        if self.config.pristine:
            return result

        reserved = {
            "_self": meta.component,
            "_target": meta.target,
            "_env": meta.env,
            "_config": self.app_config,
        }
        for key, value in reserved.items():
            if key not in result and value is not None:
                result[key] = value
        return result

    async def render(
        self,
        path: Path | str,
        raw_source: str,
        context: "Mapping[str, Any] | None" = None,
        meta: RenderMeta | None = None,
    ) -> str:
        """Render an entry template.

        Rendering runs to completion inline; the coroutine never suspends.

        Args:
            path: Location of the template, used to name it when `meta` has no
                component.
            raw_source: Template source, compiled as-is without a lookup.
            context: Render context. Not modified.
            meta: Host-supplied entity, target and environment.

        Returns:
            The rendered text.

        Raises:
            TemplateNotFoundError: If an include cannot be located.
            RenderError: If Jinja2 fails while compiling or rendering.
        """
        return self.render_sync(path, raw_source, context, meta)

    def render_sync(
        self,
        path: Path | str,
        raw_source: str,
        context: "Mapping[str, Any] | None" = None,
        meta: RenderMeta | None = None,
    ) -> str:
        """Synchronous body of ``render``."""
        meta = meta if meta is not None else RenderMeta()
        name = self.template_name(path, meta)
        render_context = self.build_context(context, meta)

        try:
            source = self.loader.load_source(name, precompiled=raw_source)
            template = self.loader.compile(
                self.environment, name, source, filename=str(path)
            )
            return template.render(render_context)
        except TesseraError as e:
            self._logger.error("render_failed", template=name, error=str(e))
            raise
        except Exception as e:
            self._logger.error("render_failed", template=name, error=str(e))
            raise RenderError(str(e), name=name, cause=e) from e


def register(
    library: "ComponentLibrary",
    config: AdapterConfig | None = None,
    *,
    app_config: "Mapping[str, Any] | None" = None,
    logger: "FilteringBoundLogger | None" = None,
) -> JinjaAdapter:
    """Create an adapter for a library.

    The adapter applies the configured handle prefix to the library's views.
    """
    return JinjaAdapter(library, config, app_config=app_config, logger=logger)
