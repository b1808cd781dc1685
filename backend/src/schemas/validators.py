"""Shared validation functions for Pydantic schemas."""


def validate_not_blank(value: str) -> str:
    """
    Strip surrounding whitespace and reject empty results.

    Args:
        value: The raw string.

    Returns:
        The stripped string.

    Raises:
        ValueError: If nothing but whitespace was provided.
    """
    stripped = value.strip()
    if not stripped:
        raise ValueError("must not be blank")
    return stripped
