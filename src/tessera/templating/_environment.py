"""Jinja2 Environment factory."""

from typing import TYPE_CHECKING

from jinja2 import Environment

if TYPE_CHECKING:
    from jinja2 import BaseLoader, Template

    from tessera.config import AdapterConfig


def create_environment(
    loader: "BaseLoader",
    config: "AdapterConfig",
    *,
    template_class: "type[Template] | None" = None,
) -> Environment:
    """Create a Jinja2 Environment for component templates.

    Jinja2's own template cache is disabled (``cache_size=0``); compiled
    templates are cached by the adapter's TemplateRegistry instead.

    User-supplied functions, filters, tests and extensions from the config
    are registered as given.

    Args:
        loader: Loader resolving component references.
        config: Adapter configuration.
        template_class: Template class to compile into. Defaults to
            ``jinja2.Template``.

    Returns:
        Configured Jinja2 Environment.

    Example:
        env = create_environment(loader, AdapterConfig())
        template = env.get_template("@button")
        result = template.render(text="Save")
    """
    options = config.environment

    # Note: autoescape is intentionally disabled by default; component
    # templates are trusted library content.
    env = Environment(
        loader=loader,
        autoescape=options.autoescape,  # noqa: S701
        trim_blocks=options.trim_blocks,
        lstrip_blocks=options.lstrip_blocks,
        keep_trailing_newline=options.keep_trailing_newline,
        cache_size=0,
        auto_reload=False,
    )
    if template_class is not None:
        env.template_class = template_class

    env.globals.update(config.functions)
    env.filters.update(config.filters)
    env.tests.update(config.tests)
    for extension in config.extensions:
        env.add_extension(extension)

    return env
