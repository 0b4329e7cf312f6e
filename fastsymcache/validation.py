"""Input validation and path sanitization.

Single Responsibility: This module handles validation of the artifact
key, whose parts become path components of the on-disk cache layout.
"""

from fastsymcache.errors import InvalidArtifactKeyError


def check_path_safe(component: str) -> str:
    """Reject anything that would not stay a single component of a cache path."""
    if component in (".", ".."):
        raise InvalidArtifactKeyError(f"Path traversal not allowed: {component}")

    if "/" in component or "\\" in component:
        raise InvalidArtifactKeyError(f"Path separator characters not allowed: {component}")

    if "\x00" in component:
        raise InvalidArtifactKeyError(f"NUL character not allowed: {component!r}")

    return component


def sanitize_path_component(component: str) -> str:
    """Sanitize a path component to prevent directory traversal attacks."""
    if not component:
        raise InvalidArtifactKeyError("Path component cannot be empty")

    return check_path_safe(component)


def validate_artifact_key(file_name: str, debug_id: str) -> None:
    """Validate the (file name, debug id) pair used to address a symbol.

    The debug id is opaque: it only has to stay inside the cache directory.
    """
    if not file_name or len(file_name) > 255:
        raise InvalidArtifactKeyError("Invalid file name: must be non-empty and <= 255 characters")

    sanitize_path_component(file_name)
    check_path_safe(debug_id)
