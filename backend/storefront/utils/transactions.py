from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session


@contextmanager
def smart_transaction(session: Session, nested: bool = False) -> Iterator[Session]:
    """
    Run a unit of work on the given Session.

    The outermost unit commits on success and rolls back on any error. A
    nested unit runs inside a SAVEPOINT (begin_nested) so a failing inner
    block leaves the enclosing unit usable.
    Usage:
        with smart_transaction(db):
            ... DB work ...
    """
    if nested:
        with session.begin_nested():
            yield session
        return
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
