"""Both calling conventions against a local MongoDB server.

Runs the same small workload twice: once with ``await`` and once with
error-first callbacks chained from inside a coroutine. Pass a connection
string as the first argument to target another server.
"""

import asyncio
import logging
import sys
from typing import Any

from pymongo_legacy import Collection, MongoClient, setup_logging

logger = logging.getLogger(__name__)

DEFAULT_URI = "mongodb://localhost:27017"


async def awaitable_style(client: MongoClient) -> list[dict[str, Any]]:
    """Insert a few documents and read them back using ``await``."""
    db = client["legacy_example"]
    await db.drop_collection("pets")

    pets = await db.create_collection("pets")
    await pets.insert_many([{"name": "tom", "species": "cat"}, {"name": "rex", "species": "dog"}])

    await pets.rename("animals")
    renamed = db["animals"]
    logger.info(f"Renamed collection to {renamed.full_name}")

    return await renamed.find({}, {"_id": 0}).sort("name").to_list(None)


def callback_style(client: MongoClient) -> "asyncio.Future[list[dict[str, Any]]]":
    """Run the same workload with error-first callbacks.

    Must be called from a running event loop; the returned future resolves
    once the last callback has fired.
    """
    done: asyncio.Future[list[dict[str, Any]]] = asyncio.get_running_loop().create_future()
    db = client["legacy_example"]

    def fail_or(step: Any) -> Any:
        def callback(error: BaseException | None, result: Any) -> None:
            if error is not None:
                done.set_exception(error)
            else:
                step(result)

        return callback

    def on_documents(documents: list[dict[str, Any]]) -> None:
        done.set_result(documents)

    def on_renamed(_: Any) -> None:
        collection = db["animals"]
        logger.info(f"Renamed collection to {collection.full_name}")
        collection.find({}, {"_id": 0}).sort("name").to_list(None, fail_or(on_documents))

    def on_created(pets: Collection) -> None:
        pets.insert_many(
            [{"name": "tom", "species": "cat"}, {"name": "rex", "species": "dog"}],
            callback=fail_or(lambda _: pets.rename("animals", callback=fail_or(on_renamed))),
        )

    def on_dropped(_: Any) -> None:
        db.create_collection("pets", callback=fail_or(on_created))

    db.drop_collection("pets", callback=fail_or(on_dropped))
    return done


async def main(uri: str) -> None:
    client = await MongoClient.connect(uri, serverSelectionTimeoutMS=2000)
    try:
        logger.info(f"Awaitable style: {await awaitable_style(client)}")
        await client["legacy_example"].drop_collection("animals")
        logger.info(f"Callback style: {await callback_style(client)}")
    finally:
        await client.close()


if __name__ == "__main__":
    setup_logging(level="INFO")
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_URI))
