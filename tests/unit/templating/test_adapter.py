from typing import TYPE_CHECKING

import anyio
import pytest

from tessera.config import AdapterConfig
from tessera.exceptions import RenderError, TemplateNotFoundError
from tessera.library import LibraryEvent
from tessera.templating import JinjaAdapter, RenderMeta, register
from tests.conftest import LIBRARY_ROOT

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from tessera.library import ComponentCollection

INCLUDE_BUTTON = '{% include "/atoms/button/button.j2" %}'


def render(
    adapter: JinjaAdapter,
    path: str,
    source: str,
    context: dict[str, object] | None = None,
    meta: RenderMeta | None = None,
) -> str:
    return anyio.run(adapter.render, LIBRARY_ROOT / path, source, context, meta)


class TestRender:
    def test_nested_includes_render_with_component_defaults(
        self, adapter: JinjaAdapter, library: "ComponentCollection"
    ) -> None:
        view = library.get_view("organisms/menu/menu.j2")
        assert view is not None

        result = anyio.run(adapter.render, view.path, view.content)

        assert result == "<nav><div>Card<button>Click</button></div></nav>"

    def test_handle_and_rooted_includes_render_identically(
        self, adapter: JinjaAdapter
    ) -> None:
        by_handle = render(adapter, "pages/a.j2", '{% include "@button" %}')
        by_path = render(adapter, "pages/b.j2", INCLUDE_BUTTON)

        assert by_handle == by_path == "<button>Click</button>"

    @pytest.mark.parametrize(
        "path",
        ["index.j2", "pages/home.j2", "organisms/menu/sub/deep.j2"],
    )
    def test_rooted_include_is_independent_of_caller_depth(
        self, adapter: JinjaAdapter, path: str
    ) -> None:
        assert render(adapter, path, INCLUDE_BUTTON) == "<button>Click</button>"

    def test_render_is_repeatable(self, adapter: JinjaAdapter) -> None:
        first = render(adapter, "pages/a.j2", INCLUDE_BUTTON)
        second = render(adapter, "pages/a.j2", INCLUDE_BUTTON)

        assert first == second
        assert list(adapter.registry) == ["atoms/button/button.j2"]

    def test_entry_source_is_not_cached(self, adapter: JinjaAdapter) -> None:
        assert render(adapter, "pages/a.j2", "one") == "one"
        assert render(adapter, "pages/a.j2", "two") == "two"
        assert len(adapter.registry) == 0


class TestSelf:
    def test_included_component_gets_its_own_self(
        self, adapter: JinjaAdapter
    ) -> None:
        meta = RenderMeta(component={"handle": "page"})

        result = render(adapter, "pages/a.j2", '{% include "@badge" %}', meta=meta)

        assert result == "badge--default"

    def test_without_import_context_include_inherits_entry_self(
        self, plain_adapter: JinjaAdapter
    ) -> None:
        meta = RenderMeta(component={"handle": "page"})

        result = render(
            plain_adapter, "pages/a.j2", '{% include "@badge" %}', meta=meta
        )

        assert result == "page"

    def test_pristine_renders_without_self(
        self, library: "ComponentCollection", logger: "FilteringBoundLogger"
    ) -> None:
        adapter = JinjaAdapter(
            library, AdapterConfig(pristine=True, import_context=True), logger=logger
        )
        meta = RenderMeta(component={"handle": "page"})

        result = render(adapter, "pages/a.j2", '{% include "@badge" %}', meta=meta)

        assert result == "none"

    def test_variant_handle_selects_variant_context(
        self, adapter: JinjaAdapter, library: "ComponentCollection"
    ) -> None:
        view = library.get_view("atoms/button/button.j2")
        assert view is not None
        meta = RenderMeta(component={"handle": "button--primary"})

        result = render(adapter, "atoms/button/button.j2", view.content, meta=meta)

        assert result == "<button>Go</button>"

    def test_variant_handle_include_renders_variant_context(
        self, adapter: JinjaAdapter
    ) -> None:
        result = render(adapter, "pages/a.j2", '{% include "@button--primary" %}')

        assert result == "<button>Go</button>"

    def test_variant_handle_include_sets_variant_self(
        self, adapter: JinjaAdapter, library: "ComponentCollection"
    ) -> None:
        _ = library.add_component(
            "tag",
            "atoms/tag/tag.j2",
            "{{ _self.handle }}",
            config={"variants": [{"name": "default"}, {"name": "small"}]},
        )

        result = render(adapter, "pages/a.j2", '{% include "@tag--small" %}')

        assert result == "tag--small"

    def test_unknown_variant_include_raises_not_found(
        self, adapter: JinjaAdapter
    ) -> None:
        with pytest.raises(TemplateNotFoundError):
            _ = render(adapter, "pages/a.j2", '{% include "@button--huge" %}')


class TestContext:
    def test_caller_values_override_component_defaults(
        self, adapter: JinjaAdapter
    ) -> None:
        assert render(adapter, "pages/a.j2", INCLUDE_BUTTON, {"text": "Mine"}) == (
            "<button>Mine</button>"
        )

    def test_caller_context_is_not_modified(self, adapter: JinjaAdapter) -> None:
        context: dict[str, object] = {"title": "Page", "nested": {"a": 1}}
        meta = RenderMeta(component={"handle": "page"}, target="t", env="e")

        _ = render(adapter, "pages/a.j2", INCLUDE_BUTTON, context, meta)

        assert context == {"title": "Page", "nested": {"a": 1}}

    def test_reserved_keys_are_injected_when_absent(
        self, library: "ComponentCollection", logger: "FilteringBoundLogger"
    ) -> None:
        adapter = JinjaAdapter(
            library, AdapterConfig(), app_config={"title": "Lib"}, logger=logger
        )
        meta = RenderMeta(target="preview", env="server")

        result = render(
            adapter,
            "pages/a.j2",
            "{{ _target }}|{{ _env }}|{{ _config.title }}",
            {"_target": "mine"},
            meta,
        )

        assert result == "mine|server|Lib"

    def test_pristine_injects_no_reserved_keys(
        self, library: "ComponentCollection", logger: "FilteringBoundLogger"
    ) -> None:
        adapter = JinjaAdapter(
            library, AdapterConfig(pristine=True), app_config={"a": 1}, logger=logger
        )

        result = render(
            adapter,
            "pages/a.j2",
            "{{ _target is defined }}{{ _config is defined }}",
            meta=RenderMeta(target="preview"),
        )

        assert result == "FalseFalse"


    def test_included_keys_exclude_environment_globals(
        self, adapter: JinjaAdapter, library: "ComponentCollection"
    ) -> None:
        _ = library.add_component(
            "keys",
            "atoms/keys/keys.j2",
            "{{ _keys | join(',') }}",
            config={"context": {"size": "m"}},
        )

        result = render(adapter, "pages/a.j2", '{% include "@keys" %}', {"title": "x"})

        assert result == "size,title"


class TestTemplateName:
    def test_component_handle_is_prefixed(self, adapter: JinjaAdapter) -> None:
        meta = RenderMeta(component={"handle": "button"})

        assert adapter.template_name(LIBRARY_ROOT / "x.j2", meta) == "@button"

    def test_path_relative_to_root_without_component(
        self, adapter: JinjaAdapter
    ) -> None:
        name = adapter.template_name(LIBRARY_ROOT / "pages/home.j2", RenderMeta())

        assert name == "pages/home.j2"


class TestErrors:
    def test_syntax_error_raises_render_error(self, adapter: JinjaAdapter) -> None:
        with pytest.raises(RenderError) as exc_info:
            _ = render(adapter, "pages/a.j2", "{% if %}")

        assert exc_info.value.name == "pages/a.j2"
        assert str(exc_info.value) == str(exc_info.value.cause)

    def test_runtime_error_message_is_preserved(self, adapter: JinjaAdapter) -> None:
        with pytest.raises(RenderError, match="division by zero") as exc_info:
            _ = render(adapter, "pages/a.j2", "{{ x / 0 }}", {"x": 1})

        assert isinstance(exc_info.value.cause, ZeroDivisionError)

    def test_missing_include_raises_not_found(self, adapter: JinjaAdapter) -> None:
        with pytest.raises(TemplateNotFoundError) as exc_info:
            _ = render(adapter, "pages/a.j2", '{% include "@missing" %}')

        assert exc_info.value.location == "@missing"

    def test_ignore_missing_include_renders_empty(
        self, adapter: JinjaAdapter
    ) -> None:
        result = render(
            adapter, "pages/a.j2", '[{% include "@missing" ignore missing %}]'
        )

        assert result == "[]"


class TestLifecycle:
    def test_register_applies_handle_prefix(
        self, library: "ComponentCollection", logger: "FilteringBoundLogger"
    ) -> None:
        config = AdapterConfig(handle_prefix="$", import_context=True)
        adapter = register(library, config, logger=logger)

        result = render(adapter, "pages/a.j2", '{% include "$button" %}')

        assert result == "<button>Click</button>"
        assert {view.handle for view in library.views} >= {"$button", "$card"}

    def test_direct_construction_applies_handle_prefix(
        self, library: "ComponentCollection", logger: "FilteringBoundLogger"
    ) -> None:
        config = AdapterConfig(handle_prefix="$", import_context=True)
        adapter = JinjaAdapter(library, config, logger=logger)

        result = render(adapter, "pages/a.j2", '{% include "$button" %}')

        assert result == "<button>Click</button>"
        view = library.get_view("atoms/button/button.j2")
        assert view is not None
        assert view.handle == "$button"

    def test_adapter_subscribes_on_creation(
        self, adapter: JinjaAdapter, library: "ComponentCollection"
    ) -> None:
        assert library.events.handler_count(LibraryEvent.VIEW_UPDATED) == 1

    def test_close_unsubscribes(
        self, library: "ComponentCollection", logger: "FilteringBoundLogger"
    ) -> None:
        with JinjaAdapter(library, logger=logger):
            assert library.events.handler_count(LibraryEvent.VIEW_REMOVED) == 1

        assert library.events.handler_count(LibraryEvent.VIEW_REMOVED) == 0
