"""
Union synthesizer.

Builds the definition of a discriminated union from a discriminator
mapping and the structures the generator emitted for each variant.
Both strategies share variant resolution, ordering and skip reporting;
they differ only in what a variant carries:

- INLINE_FIELDS mirrors every field of the structure into the variant,
  which is unsafe when a field's type is an enum declared inside another
  model file (such enums are not addressable from the union's file).
- WRAPPER holds a Box of the structure itself and can always be built.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from ...utils import to_pascal_case
from ..config import SynthesisStrategy
from ..reader.structure_reader import FieldDescriptor, StructureDescriptor
from ..schema_ast.nodes import Discriminator
from .rust_types import references_any

logger = logging.getLogger(__name__)


class SkipReason(str, Enum):
    """Why no union was emitted for a discriminated schema."""

    MISSING_STRUCTURE = "missing-structure"
    INLINE_TYPE_REFERENCE = "inline-type-reference"
    EMPTY_MAPPING = "empty-mapping"


@dataclass(frozen=True)
class Skipped:
    """A union that could not be synthesized. Not an error."""

    union_name: str
    reason: SkipReason
    details: tuple[str, ...] = ()

    def __str__(self) -> str:
        suffix = f": {', '.join(self.details)}" if self.details else ""
        return f"{self.union_name} skipped ({self.reason.value}){suffix}"


@dataclass(frozen=True)
class VariantMapping:
    """One discriminator entry bound to its generated structure."""

    tag: str
    schema_name: str
    structure: StructureDescriptor
    variant_name: str


@dataclass(frozen=True)
class UnionDefinition:
    """A synthesized union, ready to be rendered."""

    union_name: str
    strategy: SynthesisStrategy
    variants: tuple[VariantMapping, ...]
    tag_property: str = "type"

    def payload_fields(self, variant: VariantMapping) -> tuple[FieldDescriptor, ...]:
        """Fields mirrored into the variant. The tag field is carried by the enum itself."""
        if self.strategy is SynthesisStrategy.WRAPPER:
            return ()
        return tuple(f for f in variant.structure.fields if f.wire_name != self.tag_property)

    @property
    def first_variant(self) -> VariantMapping:
        return self.variants[0]


class UnionSynthesizer:
    """Synthesizes union definitions under one strategy."""

    def __init__(self, strategy: SynthesisStrategy = SynthesisStrategy.INLINE_FIELDS):
        self.strategy = SynthesisStrategy(strategy)

    def synthesize(
        self,
        union_name: str,
        discriminator: Discriminator,
        structures_by_tag: dict[str, StructureDescriptor | None],
    ) -> UnionDefinition | Skipped:
        """
        Synthesize the union owned by `union_name`.

        Args:
            union_name: Name of the schema carrying the discriminator
            discriminator: Its tag property and tag -> schema mapping
            structures_by_tag: Parsed structure per wire tag, None when the
                structure file could not be read

        Returns:
            The union definition, or a Skipped value explaining why none
            can be emitted
        """
        if not discriminator.mapping:
            return Skipped(union_name, SkipReason.EMPTY_MAPPING)

        missing = tuple(f"{tag} ({schema})" for tag, schema in discriminator.mapping.items() if structures_by_tag.get(tag) is None)
        if missing:
            return Skipped(union_name, SkipReason.MISSING_STRUCTURE, missing)

        definition = UnionDefinition(
            union_name=union_name,
            strategy=self.strategy,
            variants=self._resolve_variants(discriminator, {tag: s for tag, s in structures_by_tag.items() if s is not None}),
            tag_property=discriminator.property_name or "type",
        )

        if self.strategy is SynthesisStrategy.INLINE_FIELDS:
            offending = find_inline_type_references(definition)
            if offending:
                return Skipped(union_name, SkipReason.INLINE_TYPE_REFERENCE, offending)

        return definition

    def _resolve_variants(
        self,
        discriminator: Discriminator,
        structures_by_tag: dict[str, StructureDescriptor],
    ) -> tuple[VariantMapping, ...]:
        """Bind tags to structures in mapping declaration order and name the variants."""
        variants = []
        used: set[str] = set()
        for tag, schema_name in discriminator.mapping.items():
            structure = structures_by_tag[tag]
            name = _variant_name(tag, structure.declared_name, used)
            used.add(name)
            variants.append(VariantMapping(tag=tag, schema_name=schema_name, structure=structure, variant_name=name))
        return tuple(variants)


def _variant_name(tag: str, declared_name: str, used: set[str]) -> str:
    name = to_pascal_case(tag)
    if not name or not name[0].isalpha() or name in used:
        name = declared_name
    candidate, n = name, 2
    while candidate in used:
        candidate = f"{name}{n}"
        n += 1
    return candidate


def find_inline_type_references(definition: UnionDefinition) -> tuple[str, ...]:
    """
    List payload fields whose type names an enum that only exists inside a model file.

    Returns:
        One "Variant.field -> Type" entry per offending field, empty when
        the union can safely mirror every field
    """
    local_names: set[str] = set()
    for variant in definition.variants:
        local_names |= variant.structure.local_enum_names
    if not local_names:
        return ()

    offending = []
    for variant in definition.variants:
        for field in definition.payload_fields(variant):
            names = references_any(field.type_expression, local_names)
            if names:
                offending.append(f"{variant.variant_name}.{field.local_name} -> {', '.join(names)}")
    return tuple(offending)


def synthesize(
    union_name: str,
    discriminator: Discriminator,
    structures_by_tag: dict[str, StructureDescriptor | None],
    strategy: SynthesisStrategy = SynthesisStrategy.INLINE_FIELDS,
) -> UnionDefinition | Skipped:
    """Convenience function to synthesize one union."""
    return UnionSynthesizer(strategy).synthesize(union_name, discriminator, structures_by_tag)
