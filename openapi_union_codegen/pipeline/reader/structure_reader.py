"""
Reader for generated Rust structures.

Recovers the field list of a generated model file from textual markers
only. The markers are bundled in a versioned ExtractionContract so that
a change in the generator's output format means a new contract and a new
conformance fixture, not a looser pattern.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

OPENING = "<([{"
CLOSING = ">)]}"


@dataclass(frozen=True)
class ExtractionContract:
    """Marker patterns identifying structures, inline enums and fields in generated source."""

    name: str

    # Group 1: the declared structure name
    struct_pattern: str

    # Group 1: the name of an enum declared in the same file
    enum_pattern: str

    # Named groups: attrs (annotation arguments), wire, local. The match ends where the type starts.
    field_pattern: str

    optional_prefix: str = "Option<"

    def find_struct(self, source: str) -> str | None:
        match = re.search(self.struct_pattern, source)
        return match.group(1) if match else None

    def find_enums(self, source: str) -> list[str]:
        return [match.group(1) for match in re.finditer(self.enum_pattern, source)]

    def find_fields(self, source: str) -> list[re.Match]:
        return list(re.finditer(self.field_pattern, source))


# openapi-generator 7.x, "rust" target (serde models)
OPENAPI_GENERATOR_RUST_7 = ExtractionContract(
    name="openapi-generator-rust-7",
    struct_pattern=r"pub struct (\w+)",
    enum_pattern=r"pub enum (\w+)\s*\{",
    field_pattern=(
        r"#\[serde\((?P<attrs>[^\]]*?\brename\s*=\s*\"(?P<wire>[^\"]+)\"[^\]]*)\)\]\s*"
        r"(?:#\[[^\]]*\]\s*)*"
        r"pub\s+(?P<local>(?:r#)?\w+)\s*:\s*"
    ),
)

DEFAULT_CONTRACT = OPENAPI_GENERATOR_RUST_7


@dataclass(frozen=True)
class FieldDescriptor:
    """One field of a generated structure."""

    wire_name: str
    local_name: str
    type_expression: str
    is_optional: bool = False

    # Raw arguments of the serde annotation, e.g. rename = "x", skip_serializing_if = "Option::is_none"
    annotation: str = ""

    @property
    def omit_if_absent(self) -> bool:
        return "skip_serializing_if" in self.annotation


@dataclass(frozen=True)
class StructureDescriptor:
    """One parsed generated structure."""

    declared_name: str
    fields: tuple[FieldDescriptor, ...] = ()
    local_enum_names: frozenset[str] = field(default_factory=frozenset)
    path: Path | None = None


def read_structure(path: Path | str, contract: ExtractionContract = DEFAULT_CONTRACT) -> StructureDescriptor | None:
    """
    Read a generated structure file.

    Args:
        path: Path of the generated file
        contract: Marker set of the generator version that produced the file

    Returns:
        The parsed structure, or None if the file does not exist or
        declares no structure
    """
    path = Path(path)
    if not path.is_file():
        logger.debug("No structure file at %s", path)
        return None
    structure = parse_structure(path.read_text(encoding="utf-8"), contract)
    if structure is None:
        return None
    return StructureDescriptor(
        declared_name=structure.declared_name,
        fields=structure.fields,
        local_enum_names=structure.local_enum_names,
        path=path,
    )


def parse_structure(source: str, contract: ExtractionContract = DEFAULT_CONTRACT) -> StructureDescriptor | None:
    """Parse the text of a generated structure file."""
    declared_name = contract.find_struct(source)
    if declared_name is None:
        return None

    matches = contract.find_fields(source)
    fields = []
    for i, match in enumerate(matches):
        limit = matches[i + 1].start() if i + 1 < len(matches) else len(source)
        type_expression = _scan_type(source, match.end(), limit)
        fields.append(
            FieldDescriptor(
                wire_name=match.group("wire"),
                local_name=match.group("local"),
                type_expression=type_expression,
                is_optional=type_expression.startswith(contract.optional_prefix),
                annotation=" ".join(match.group("attrs").split()),
            )
        )

    return StructureDescriptor(
        declared_name=declared_name,
        fields=tuple(fields),
        local_enum_names=frozenset(contract.find_enums(source)),
    )


def _scan_type(source: str, start: int, limit: int) -> str:
    """Return the type text starting at `start`, up to the first top-level comma or closing brace."""
    depth = 0
    end = limit
    for j in range(start, limit):
        char = source[j]
        if char in OPENING:
            depth += 1
        elif char in CLOSING:
            if depth == 0:
                end = j
                break
            depth -= 1
        elif char == "," and depth == 0:
            end = j
            break
    return " ".join(source[start:end].split())
