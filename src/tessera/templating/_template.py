"""Template class that routes every render through a ContextPatcher."""

from typing import TYPE_CHECKING, Any, ClassVar

from jinja2 import Template

if TYPE_CHECKING:
    from collections.abc import Mapping

    from jinja2.runtime import Context

    from ._context import ContextPatcher


class ComponentTemplate(Template):
    """Jinja2 template whose new contexts are patched.

    ``Template.render`` and ``{% include %}`` both create the render context
    through ``new_context``, so overriding it covers entry renders and nested
    includes alike. Use ``bind_template_class`` to get a subclass tied to one
    patcher; this base class itself renders like a stock template.
    """

    context_patcher: ClassVar["ContextPatcher | None"] = None

    def new_context(
        self,
        vars: "Mapping[str, Any] | None" = None,  # noqa: A002
        shared: bool = False,  # noqa: FBT001, FBT002
        locals: "Mapping[str, Any] | None" = None,  # noqa: A002
    ) -> "Context":
        patcher = type(self).context_patcher
        if patcher is not None:
            vars = vars if vars is not None else {}  # noqa: A001
            hidden = self.inherited_globals(vars)
            vars = patcher.patch(self.name, vars, hidden=hidden)  # noqa: A001
        return super().new_context(vars, shared, locals)

    def inherited_globals(self, context: "Mapping[str, Any]") -> frozenset[str]:
        """Keys of `context` that still hold this template's own global values.

        Includes receive the including template's full context, environment
        globals among it.
        """
        return frozenset(
            key
            for key, value in context.items()
            if key in self.globals and self.globals[key] is value
        )


def bind_template_class(patcher: "ContextPatcher") -> type[ComponentTemplate]:
    """Create a ComponentTemplate subclass bound to `patcher`.

    Each adapter installs its own subclass as ``environment.template_class``,
    so other environments and ``jinja2.Template`` are unaffected.
    """
    return type(
        "BoundComponentTemplate",
        (ComponentTemplate,),
        {"context_patcher": patcher, "__module__": __name__},
    )
