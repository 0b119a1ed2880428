"""
Taskboard - Input Sanitization Utilities
Normalizes user text before validation and storage.
"""


def clean_text(text: str, keep_newlines: bool = True) -> str:
    """
    Strip surrounding whitespace and control characters.

    Args:
        text: The input text
        keep_newlines: Keep newline and tab characters (descriptions) or drop them (titles)

    Returns:
        Cleaned text; empty string for None/empty input
    """
    if not text:
        return ""

    # Remove any null bytes
    text = text.replace('\x00', '')

    # Normalize line endings
    text = text.replace('\r\n', '\n').replace('\r', '\n')

    allowed = '\n\t' if keep_newlines else ''
    text = ''.join(char for char in text if ord(char) >= 32 or char in allowed)

    return text.strip()


def normalize_category_name(name: str) -> str:
    """
    Canonical casing for a category name.

    Trims surrounding whitespace, upper-cases the first character and
    lower-cases the rest: " groceries " -> "Groceries", "hOME" -> "Home".

    Returns:
        Normalized name, or "" when nothing is left after trimming
    """
    trimmed = (name or "").strip()
    if not trimmed:
        return ""
    return trimmed[0].upper() + trimmed[1:].lower()
