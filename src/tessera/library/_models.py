# pyright: reportAny=false, reportExplicitAny=false
"""Component library models.

Components own an ordered set of variants, one of which is the default.
Each component template is exposed to the template engine as a View.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, computed_field

from tessera.config import copy_value, deep_merge

ENTITY_MARKER = "@"
"""Marker that prefixes entity identifiers passed to ``find()``."""

VARIANT_SEPARATOR = "--"
DEFAULT_VARIANT_NAME = "default"


class Variant(BaseModel):
    """An alternate configured rendering of a component.

    Attributes:
        name: Variant name, unique within its component.
        component: Name of the owning component.
        label: Human-readable label.
        context: Effective context (component context with the variant's
            overrides merged on top).
        is_default: Whether this is the component's default variant.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    is_variant: ClassVar[bool] = True

    name: str = Field(..., min_length=1)
    component: str
    label: str | None = None
    context: dict[str, Any] = Field(default_factory=dict)
    is_default: bool = False

    @computed_field  # type: ignore[prop-decorator]
    @property
    def handle(self) -> str:
        """Handle of the variant, ``<component>--<variant>``."""
        return f"{self.component}{VARIANT_SEPARATOR}{self.name}"

    def get_context(self) -> dict[str, Any]:
        """Return an independent copy of the effective context."""
        return copy_value(self.context)

    def to_json(self) -> dict[str, Any]:
        """Serialize the variant for use as ``_self`` in templates."""
        return self.model_dump()


class Component(BaseModel):
    """A component in the library.

    Attributes:
        name: Component name, also its handle without prefix.
        label: Human-readable label.
        context: Component-level context shared by all variants.
        variants: Ordered variants. Never empty for components built with
            ``from_config``.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    is_variant: ClassVar[bool] = False

    name: str = Field(..., min_length=1)
    label: str | None = None
    context: dict[str, Any] = Field(default_factory=dict)
    variants: tuple[Variant, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def handle(self) -> str:
        """Handle of the component (its name)."""
        return self.name

    @property
    def default_variant(self) -> Variant:
        """The default variant.

        Falls back to the first variant, then to a variant synthesized from
        the component context.
        """
        for variant in self.variants:
            if variant.is_default:
                return variant
        if self.variants:
            return self.variants[0]
        return Variant(
            name=DEFAULT_VARIANT_NAME,
            component=self.name,
            label=self.label,
            context=copy_value(self.context),
            is_default=True,
        )

    def get_variant(self, name: str) -> Variant | None:
        """Return the variant with the given name, if any."""
        return next((v for v in self.variants if v.name == name), None)

    def get_context(self) -> dict[str, Any]:
        """Return an independent copy of the component context."""
        return copy_value(self.context)

    def to_json(self) -> dict[str, Any]:
        """Serialize the component."""
        return self.model_dump()

    @classmethod
    def from_config(cls, name: str, config: Mapping[str, Any]) -> "Component":
        """Build a component from its configuration mapping.

        Recognized keys: ``label``, ``context``, ``variants`` (list of
        mappings with ``name``, ``label``, ``context``) and ``default`` (name
        of the default variant).

        Args:
            name: Component name.
            config: Parsed component configuration.

        Returns:
            The component with effective variant contexts computed.
        """
        context = dict(config.get("context") or {})
        raw_variants = list(config.get("variants") or [])
        if not raw_variants:
            raw_variants = [{"name": DEFAULT_VARIANT_NAME}]

        names = [str(raw.get("name", "")) for raw in raw_variants]
        default_name = str(config.get("default") or DEFAULT_VARIANT_NAME)
        if default_name not in names:
            default_name = names[0]

        variants = tuple(
            Variant(
                name=variant_name,
                component=name,
                label=raw.get("label"),
                context=deep_merge(context, dict(raw.get("context") or {})),
                is_default=variant_name == default_name,
            )
            for variant_name, raw in zip(names, raw_variants, strict=True)
        )
        return cls(
            name=name,
            label=config.get("label"),
            context=context,
            variants=variants,
        )


type Entity = Component | Variant


@dataclass(frozen=True, slots=True)
class View:
    """One template entry in the component library.

    Attributes:
        path: Absolute, normalized path of the template under the library root.
        handle: Logical identifier, carrying the adapter's handle prefix.
        content: Raw template source.
        variants: Variants of the owning component.
    """

    path: Path
    handle: str
    content: str
    variants: tuple[Variant, ...] = ()
