"""Key normalization for bucket locations."""
import posixpath


def _canonical(path: str) -> str:
    # Anchoring at "/" keeps ".." from climbing above the anchor
    collapsed = posixpath.normpath("/" + path.replace("\\", "/"))
    return collapsed.lstrip("/")


def normalize_root(root: str | None) -> str:
    """
    Canonicalize a configured root prefix.

    Args:
        root: Raw prefix, possibly with leading slash or backslashes

    Returns:
        Slash-separated prefix without leading slash ("" for none)
    """
    if not root:
        return ""
    return _canonical(root)


def full_path(root: str, relative: str) -> str:
    """
    Resolve a location relative to the root prefix into a bucket key.

    The relative part is collapsed on its own before the root is prepended,
    so ``..`` never leaves the root prefix:
    ``full_path("assets", "x/../y.png")`` is ``"assets/y.png"``,
    ``full_path("assets", "../../y.png")`` is ``"assets/y.png"`` and
    ``full_path("assets", "")`` is ``"assets"``.

    Args:
        root: Root prefix (already normalized or not)
        relative: Location relative to the root

    Returns:
        Normalized bucket key
    """
    prefix = normalize_root(root)
    key = _canonical(relative)
    if prefix and key:
        return f"{prefix}/{key}"
    return prefix or key
