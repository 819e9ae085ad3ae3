"""
Helpers for Rust type expressions as they appear in generated structures.
"""

from __future__ import annotations

import re

# Wrapper and collection types that never name a model
WRAPPER_TYPES = {"Option", "Vec", "Box", "HashMap", "BTreeMap", "HashSet"}

PRIMITIVE_TYPES = {
    "i8",
    "i16",
    "i32",
    "i64",
    "i128",
    "isize",
    "u8",
    "u16",
    "u32",
    "u64",
    "u128",
    "usize",
    "f32",
    "f64",
    "bool",
    "char",
    "str",
    "String",
}

IDENTIFIER = re.compile(r"[A-Za-z_]\w*")
PATH = re.compile(r"(?:[A-Za-z_]\w*::)*[A-Za-z_]\w*")


def extract_type_names(type_expression: str) -> list[str]:
    """Return the identifier tokens of a type expression that may name a model type."""
    return [token for token in IDENTIFIER.findall(type_expression) if token not in WRAPPER_TYPES and token not in PRIMITIVE_TYPES]


def references_any(type_expression: str, names: set[str] | frozenset[str]) -> list[str]:
    """Return the names from `names` that the type expression mentions, in order of appearance."""
    return [token for token in extract_type_names(type_expression) if token in names]


def qualify_type(type_expression: str, namespace: str = "models") -> str:
    """
    Prefix bare model types with the models module path.

    Primitives, wrapper types and paths that are already qualified
    (``models::Foo``, ``std::collections::HashMap``) are left alone.
    """

    def qualify(match: re.Match) -> str:
        token = match.group(0)
        if "::" in token or token in WRAPPER_TYPES or token in PRIMITIVE_TYPES:
            return token
        return f"{namespace}::{token}"

    return PATH.sub(qualify, type_expression)


def outer_type(type_expression: str) -> str:
    """Name of the outermost type, without its module path (``Vec`` for ``Vec<models::Foo>``)."""
    match = PATH.match(type_expression.strip())
    if not match:
        return ""
    return match.group(0).rsplit("::", 1)[-1]


def default_value(type_expression: str, is_optional: bool) -> str:
    """Minimal Rust value expression for a field of the given type."""
    if is_optional:
        return "None"
    head = outer_type(type_expression)
    if head == "String":
        return "String::new()"
    if head == "Vec":
        return "Vec::new()"
    if head == "HashMap":
        return "std::collections::HashMap::new()"
    if head == "Box":
        return "Box::new(Default::default())"
    return "Default::default()"
