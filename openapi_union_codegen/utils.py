import re


def to_snake_case(name: str) -> str:
    """Convert a schema name to the snake_case file stem used by the generator.

    Acronyms stay grouped: ``URIAction`` becomes ``uri_action``, not ``u_r_i_action``.
    """
    name = re.sub(r"([a-z])([A-Z])", r"\1_\2", name)
    name = re.sub(r"([A-Z])([A-Z][a-z])", r"\1_\2", name)
    return name.lower()


def to_pascal_case(text: str) -> str:
    """Convert a wire tag such as ``image_carousel`` or ``flex`` to PascalCase."""
    words = re.findall(r"[a-z]+|[A-Z][a-z]*|[0-9]+", text.replace("_", " ").replace("-", " "))
    return "".join(word.capitalize() for word in words if word)


def ref_name(ref: str) -> str:
    """Return the schema name a ``$ref`` points at (its last path segment)."""
    return ref.rsplit("/", 1)[-1]
