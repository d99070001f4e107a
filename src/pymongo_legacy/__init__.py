"""pymongo-legacy - callback and awaitable calling conventions for PyMongo's asyncio API.

Every adapted operation can be awaited::

    collection = await db.create_collection("pets")

or called with a trailing error-first callback::

    cursor.to_list(None, on_documents)
    db.create_collection("pets", callback=on_created)

Installation extras:
  - cli: Command-line interface
  - test: Test dependencies
  - all: All functionality
"""

# Core adapter layer - independent of PyMongo
from .adapter import (
    AdapterBase,
    AdapterRegistry,
    CallingConvention,
    augment,
    dual_mode,
    dual_mode_function,
    rewrap,
)
from .models import (
    ConfigurationError,
    Manifest,
    ManifestEntry,
    SequenceWrap,
    SingleWrap,
    WrapKind,
    WrapRule,
)

# PyMongo legacy API
from .legacy import (
    ChangeStream,
    Collection,
    CommandCursor,
    Cursor,
    Database,
    GridFSBucket,
    MongoClient,
)
from .utils import setup_logging

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Manifest
    "ConfigurationError",
    "Manifest",
    "ManifestEntry",
    "SequenceWrap",
    "SingleWrap",
    "WrapKind",
    "WrapRule",
    # Adapter layer
    "AdapterBase",
    "AdapterRegistry",
    "CallingConvention",
    "augment",
    "dual_mode",
    "dual_mode_function",
    "rewrap",
    # PyMongo adapters
    "ChangeStream",
    "Collection",
    "CommandCursor",
    "Cursor",
    "Database",
    "GridFSBucket",
    "MongoClient",
    # Utilities
    "setup_logging",
]

# Package metadata
__title__ = "pymongo-legacy"
__description__ = "Callback and awaitable calling conventions for the PyMongo asyncio API"
__license__ = "Apache 2.0"
