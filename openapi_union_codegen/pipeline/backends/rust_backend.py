"""
Rust backend.

Renders union definitions as serde-annotated Rust enums, together with
their Default impl and one From impl per variant structure.
"""

from __future__ import annotations

from typing import Any

from ...utils import to_snake_case
from ..config import SynthesisStrategy
from ..schema_ast.nodes import SchemaDocument
from ..synthesis.rust_types import default_value, qualify_type
from ..synthesis.union_synthesizer import UnionDefinition, VariantMapping
from .base import UnionBackend


class RustUnionBackend(UnionBackend):
    """Backend for Rust union files."""

    TEMPLATE_LANG = "rust"
    FILE_EXTENSION = "rs"

    TEMPLATES = {
        SynthesisStrategy.INLINE_FIELDS: "union_inline_fields.rs.jinja2",
        SynthesisStrategy.WRAPPER: "union_wrapper.rs.jinja2",
    }

    def render(self, definition: UnionDefinition, document: SchemaDocument | None = None) -> str:
        context = self._prepare_union_context(definition)
        prefix = self.prefix_template.render(namespace=self.namespace, **self._prepare_header_context(document))
        body = self.jinja_env.get_template(self.TEMPLATES[definition.strategy]).render(**context)
        return prefix + "\n" + body

    def file_name(self, union_name: str) -> str:
        return f"{to_snake_case(union_name)}.{self.FILE_EXTENSION}"

    def struct_type(self, variant: VariantMapping) -> str:
        return f"{self.namespace}::{variant.structure.declared_name}"

    def _prepare_union_context(self, definition: UnionDefinition) -> dict[str, Any]:
        """
        Prepare the template context for a union.

        Args:
            definition: The union definition

        Returns:
            Dictionary of template variables
        """
        variants = [self._prepare_variant_context(definition, variant) for variant in definition.variants]

        # A structure mapped under several tags only converts into its first variant
        conversions = []
        seen: set[str] = set()
        for variant in variants:
            if variant["struct_type"] not in seen:
                seen.add(variant["struct_type"])
                conversions.append(variant)

        return {
            "union_name": definition.union_name,
            "tag_property": definition.tag_property,
            "variants": variants,
            "default": variants[0],
            "conversions": conversions,
        }

    def _prepare_variant_context(self, definition: UnionDefinition, variant: VariantMapping) -> dict[str, Any]:
        fields = []
        for field in definition.payload_fields(variant):
            fields.append(
                {
                    "local_name": field.local_name,
                    "annotation": field.annotation,
                    "type": qualify_type(field.type_expression, self.namespace),
                    "default": default_value(field.type_expression, field.is_optional),
                }
            )
        return {
            "name": variant.variant_name,
            "tag": variant.tag,
            "struct_type": self.struct_type(variant),
            "fields": fields,
        }
