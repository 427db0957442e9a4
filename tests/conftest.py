"""Shared test fixtures for Tessera tests."""

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from tessera.config import AdapterConfig
from tessera.library import ComponentCollection
from tessera.templating import JinjaAdapter
from tessera.utils import create_logger

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

LIBRARY_ROOT = Path("/styleguide/components")


@pytest.fixture
def logger(tmp_path: Path) -> "FilteringBoundLogger":
    """Logger writing to a temporary file so test output stays quiet."""
    return create_logger(level="debug", log_file=str(tmp_path / "tessera.log"))


@pytest.fixture
def library() -> ComponentCollection:
    """Component library with a small atoms/molecules/organisms tree.

    Structure:
        atoms/button/button.j2          <button>{{ text }}</button>
        atoms/badge/badge.j2            prints _self.handle or "none"
        molecules/card/card.j2          includes /atoms/button/button.j2
        organisms/menu/menu.j2          includes @card
    """
    collection = ComponentCollection(LIBRARY_ROOT)
    _ = collection.add_component(
        "button",
        "atoms/button/button.j2",
        "<button>{{ text }}</button>",
        config={
            "context": {"text": "Click"},
            "variants": [
                {"name": "default"},
                {"name": "primary", "context": {"text": "Go"}},
            ],
        },
    )
    _ = collection.add_component(
        "badge",
        "atoms/badge/badge.j2",
        "{% if _self is defined %}{{ _self.handle }}{% else %}none{% endif %}",
    )
    _ = collection.add_component(
        "card",
        "molecules/card/card.j2",
        '<div>{{ title }}{% include "/atoms/button/button.j2" %}</div>',
        config={"context": {"title": "Card"}},
    )
    _ = collection.add_component(
        "menu",
        "organisms/menu/menu.j2",
        '<nav>{% include "@card" %}</nav>',
    )
    return collection


@pytest.fixture
def adapter(
    library: ComponentCollection, logger: "FilteringBoundLogger"
) -> JinjaAdapter:
    """Adapter with context import enabled."""
    return JinjaAdapter(library, AdapterConfig(import_context=True), logger=logger)


@pytest.fixture
def plain_adapter(
    library: ComponentCollection, logger: "FilteringBoundLogger"
) -> JinjaAdapter:
    """Adapter with default configuration (no context import)."""
    return JinjaAdapter(library, AdapterConfig(), logger=logger)
