"""PyMongo asyncio API with callback support.

Importing this package installs every operation of :data:`ASYNC_API` on the
adapter classes. ``MANIFEST`` holds the installed entries with their arities
resolved against the installed PyMongo release.
"""

from ..adapter.augmentor import augment
from ..models.manifest import Manifest
from .classes import (
    REGISTRY,
    ChangeStream,
    Collection,
    CommandCursor,
    Cursor,
    Database,
    GridFSBucket,
    LegacyAdapter,
    MongoClient,
    adapt,
)
from .manifest import ASYNC_API


def install() -> Manifest:
    """Install the legacy operations on the adapter classes.

    Safe to call more than once; later calls reinstall equivalent methods.
    """
    return augment(ASYNC_API, REGISTRY)


MANIFEST = install()

__all__ = [
    "ASYNC_API",
    "MANIFEST",
    "REGISTRY",
    "ChangeStream",
    "Collection",
    "CommandCursor",
    "Cursor",
    "Database",
    "GridFSBucket",
    "LegacyAdapter",
    "MongoClient",
    "adapt",
    "install",
]
