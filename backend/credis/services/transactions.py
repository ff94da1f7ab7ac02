# Overview: Transaction helpers shared by the services.

from __future__ import annotations

from contextlib import contextmanager


def lock_for_update(query):
    """
    Apply row-level locking for critical operations.

    NOTE: SQLite ignores SELECT ... FOR UPDATE, but other DBs will honor it.
    """
    return query.with_for_update()


@contextmanager
def atomic(session):
    """
    Commit everything done inside the block as one transaction.

    Any exception rolls the whole unit back and propagates unchanged; there
    is no retry.
    """
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
