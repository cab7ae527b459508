class NotFoundError(Exception):
    """A looked-up record (product slug, order number, ...) does not exist."""
