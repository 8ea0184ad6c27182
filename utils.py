"""Utility helpers shared across server modules."""

from pathlib import Path


def resolve_served_file(base_directory: str, name: str) -> Path | None:
    """Resolve a safe path under base_directory or return None for traversal attempts."""
    if "\x00" in name:
        return None

    root = Path(base_directory).resolve()
    candidate = (root / name).resolve()

    try:
        candidate.relative_to(root)
    except ValueError:
        return None

    if candidate == root:
        return None
    return candidate
