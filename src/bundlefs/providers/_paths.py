"""Subpath parsing shared by the concrete providers."""


def split_subpath(subpath: str | None) -> tuple[str, ...] | None:
    """Split a ``/``-separated subpath into segments.

    Empty and ``.`` segments are dropped, so ``None``, ``""`` and ``"/"``
    all name the provider root (an empty tuple). Returns ``None`` for
    paths that could escape the root: any ``..`` segment, backslashes,
    or NUL bytes.

    Examples::

        >>> split_subpath("/css/site.css")
        ('css', 'site.css')
        >>> split_subpath("css//./site.css")
        ('css', 'site.css')
        >>> split_subpath("/../secret") is None
        True
    """
    if not subpath:
        return ()
    if "\\" in subpath or "\x00" in subpath:
        return None
    parts = tuple(part for part in subpath.split("/") if part and part != ".")
    if ".." in parts:
        return None
    return parts
