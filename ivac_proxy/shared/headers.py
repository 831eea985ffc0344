"""Case-insensitive helpers over ordered header lists.

Header names are matched without regard to case. Setting a header drops
every existing spelling of it first, so a logical header is never emitted
twice under different casings.
"""

from collections.abc import Iterable, Mapping

from ivac_proxy.shared.models import HeaderList


def get_header(headers: Iterable[tuple[str, str]], name: str) -> str | None:
    """Return the first value of ``name`` or None."""
    wanted = name.lower()
    for key, value in headers:
        if key.lower() == wanted:
            return value
    return None


def without_headers(headers: Iterable[tuple[str, str]], names: Iterable[str]) -> HeaderList:
    """Return a copy of ``headers`` with every header in ``names`` removed."""
    dropped = {name.lower() for name in names}
    return [(key, value) for key, value in headers if key.lower() not in dropped]


def with_headers(headers: Iterable[tuple[str, str]], overrides: Mapping[str, str]) -> HeaderList:
    """Return a copy of ``headers`` where each override replaces any existing value."""
    return without_headers(headers, overrides) + list(overrides.items())
