"""Adapter classes for the PyMongo asyncio API.

Each class owns one PyMongo object. Operations listed in the legacy manifest
are installed on these classes at import time; every other attribute is read
from the owned PyMongo object, and PyMongo objects returned that way are
wrapped in the matching adapter class.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from gridfs.asynchronous.grid_file import AsyncGridFSBucket
from pymongo import AsyncMongoClient
from pymongo.asynchronous.change_stream import AsyncChangeStream
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.command_cursor import AsyncCommandCursor
from pymongo.asynchronous.cursor import AsyncCursor
from pymongo.asynchronous.database import AsyncDatabase

from ..adapter.base import AdapterBase
from ..adapter.dual_mode import dual_mode_function
from ..adapter.rewrap import AdapterRegistry
from ..models.manifest import SingleWrap

logger = logging.getLogger(__name__)

REGISTRY = AdapterRegistry()

# PyMongo class -> registry name of its adapter
_ADAPTED_TYPES: tuple[tuple[type, str], ...] = (
    (AsyncMongoClient, "MongoClient"),
    (AsyncDatabase, "Database"),
    (AsyncCollection, "Collection"),
    (AsyncCursor, "Cursor"),
    (AsyncCommandCursor, "CommandCursor"),
    (AsyncChangeStream, "ChangeStream"),
    (AsyncGridFSBucket, "GridFSBucket"),
)


def adapt(value: Any) -> Any:
    """Wrap a PyMongo object in its adapter class; other values pass through."""
    if isinstance(value, AdapterBase):
        return value
    for raw_class, name in _ADAPTED_TYPES:
        if isinstance(value, raw_class):
            return REGISTRY.resolve(name).wrap(value)
    return value


class LegacyAdapter(AdapterBase):
    """Adapter base that wraps PyMongo objects read through attribute access."""

    def __getattr__(self, name: str) -> Any:
        value = super().__getattr__(name)
        # Databases and collections define __call__, so adapt before the callable check
        adapted = adapt(value)
        if adapted is not value or not callable(value) or isinstance(value, type):
            return adapted

        wrapped = self._wrapped

        def forward(*args: Any, **kwargs: Any) -> Any:
            result = value(*args, **kwargs)
            # Builder methods such as Cursor.sort return the cursor itself
            if result is wrapped:
                return self
            # Async operations outside the manifest resolve to adapters too
            if inspect.iscoroutine(result):
                return _adapt_awaited(result)
            return adapt(result)

        forward.__name__ = name
        forward.__doc__ = getattr(value, "__doc__", None)
        return forward

    def __getitem__(self, name: str) -> Any:
        return adapt(self._wrapped[name])


async def _adapt_awaited(awaitable: Awaitable[Any]) -> Any:
    return adapt(await awaitable)


async def _open_client(host: Any = None, **kwargs: Any) -> AsyncMongoClient:
    client: AsyncMongoClient = AsyncMongoClient(host, **kwargs)
    try:
        await client.aconnect()
    except BaseException:
        await client.close()
        raise
    return client


class _ConnectMethod:
    """``connect`` that works on both the class and its instances.

    ``MongoClient.connect(host, ...)`` builds a client, connects it and
    resolves to its adapter. ``client.connect()`` connects that client and
    resolves to the same adapter. Both accept a trailing callback.
    """

    def __init__(self) -> None:
        self._open = dual_mode_function(
            _open_client,
            REGISTRY,
            SingleWrap("MongoClient"),
            name="MongoClient.connect",
        )

    def __get__(self, instance: Any, owner: type | None = None) -> Callable[..., Any]:
        if instance is None:
            return self._open
        return dual_mode_function(
            instance._connect_self,
            REGISTRY,
            SingleWrap("MongoClient"),
            name="MongoClient.connect",
        )


class MongoClient(LegacyAdapter):
    """Adapter for :class:`pymongo.AsyncMongoClient`.

    Constructing a ``MongoClient`` builds the PyMongo client it owns; use
    :meth:`from_client` to adopt an existing one.
    """

    underlying_class = AsyncMongoClient

    def __init__(self, host: Any = None, port: int | None = None, **kwargs: Any):
        super().__init__(AsyncMongoClient(host, port, **kwargs))

    @classmethod
    def from_client(cls, client: AsyncMongoClient) -> "MongoClient":
        """Wrap an existing PyMongo client."""
        return cls.wrap(client)  # type: ignore[return-value]

    connect: Callable[..., Any] = _ConnectMethod()

    async def _connect_self(self) -> "MongoClient":
        await self._wrapped.aconnect()
        return self

    async def __aenter__(self) -> "MongoClient":
        await self._wrapped.__aenter__()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self._wrapped.__aexit__(exc_type, exc_val, exc_tb)


class Database(LegacyAdapter):
    """Adapter for :class:`pymongo.asynchronous.database.AsyncDatabase`."""

    underlying_class = AsyncDatabase


class Collection(LegacyAdapter):
    """Adapter for :class:`pymongo.asynchronous.collection.AsyncCollection`."""

    underlying_class = AsyncCollection


class _CursorAdapter(LegacyAdapter):
    def __aiter__(self) -> "_CursorAdapter":
        return self

    async def __anext__(self) -> Any:
        return await self._wrapped.__anext__()

    async def __aenter__(self) -> "_CursorAdapter":
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self._wrapped.close()


class Cursor(_CursorAdapter):
    """Adapter for :class:`pymongo.asynchronous.cursor.AsyncCursor`."""

    underlying_class = AsyncCursor


class CommandCursor(_CursorAdapter):
    """Adapter for :class:`pymongo.asynchronous.command_cursor.AsyncCommandCursor`."""

    underlying_class = AsyncCommandCursor


class ChangeStream(_CursorAdapter):
    """Adapter for :class:`pymongo.asynchronous.change_stream.AsyncChangeStream`."""

    underlying_class = AsyncChangeStream


class GridFSBucket(LegacyAdapter):
    """Adapter for :class:`gridfs.asynchronous.grid_file.AsyncGridFSBucket`.

    Constructing a ``GridFSBucket`` builds the PyMongo bucket it owns on
    ``db``, which may be a :class:`Database` adapter or a PyMongo database.
    """

    underlying_class = AsyncGridFSBucket

    def __init__(self, db: Any, bucket_name: str = "fs", **kwargs: Any):
        if isinstance(db, AdapterBase):
            db = db.unwrap()
        super().__init__(AsyncGridFSBucket(db, bucket_name, **kwargs))


for _name, _cls in (
    ("MongoClient", MongoClient),
    ("Database", Database),
    ("Collection", Collection),
    ("Cursor", Cursor),
    ("CommandCursor", CommandCursor),
    ("ChangeStream", ChangeStream),
    ("GridFSBucket", GridFSBucket),
):
    REGISTRY.register(_name, _cls)
