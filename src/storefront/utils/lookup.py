"""Generic aggregate lookup by identifier."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.exceptions import NotFound


def find_by_id(kind, identifier):
    """Return the ``kind`` aggregate with ``identifier`` or raise ``NotFound``."""
    if not identifier:
        raise NotFound(kind.__name__, identifier)
    try:
        return current_domain.repository_for(kind).get(identifier)
    except ObjectNotFoundError as exc:
        raise NotFound(kind.__name__, identifier) from exc
