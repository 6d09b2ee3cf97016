# /codelab_store/core/exceptions.py

"""
Domain exceptions raised by the persistence layer.

Conditional no-ops (duplicate environment add, removing something that is
not there) are deliberately NOT represented here: they complete normally.
A failed roster transaction is reported as a result object instead of being
raised.
"""


class PersistenceError(Exception):
    """Base class for every error surfaced by the persistence layer."""


class StoreUnavailableError(PersistenceError):
    """The backing store could not be reached or the connection attempt failed."""


class SubmissionStoreError(PersistenceError):
    """Storing or reading submissions failed; no partial state was committed."""
