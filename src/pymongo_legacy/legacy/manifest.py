"""Static table of PyMongo asyncio operations exposed in both conventions.

Arities are not listed here; they are read from the PyMongo signatures when
the table is installed, so the adapter methods always match the installed
PyMongo release. Operations taking ``*args`` (such as ``find_one``) have no
fixed arity and stay awaitable-only through attribute forwarding, which
still resolves PyMongo results to adapters.
"""

from ..models.manifest import Manifest, SingleWrap

ASYNC_API = Manifest.from_table(
    [
        # MongoClient
        ("MongoClient", "aconnect"),
        ("MongoClient", "close"),
        ("MongoClient", "drop_database"),
        ("MongoClient", "list_database_names"),
        ("MongoClient", "list_databases", SingleWrap("CommandCursor")),
        ("MongoClient", "server_info"),
        ("MongoClient", "watch", SingleWrap("ChangeStream")),
        # Database
        ("Database", "aggregate", SingleWrap("CommandCursor")),
        ("Database", "command"),
        ("Database", "create_collection", SingleWrap("Collection")),
        ("Database", "cursor_command", SingleWrap("CommandCursor")),
        ("Database", "dereference"),
        ("Database", "drop_collection"),
        ("Database", "list_collection_names"),
        ("Database", "list_collections", SingleWrap("CommandCursor")),
        ("Database", "validate_collection"),
        ("Database", "watch", SingleWrap("ChangeStream")),
        # Collection
        ("Collection", "aggregate", SingleWrap("CommandCursor")),
        ("Collection", "bulk_write"),
        ("Collection", "count_documents"),
        ("Collection", "create_index"),
        ("Collection", "create_indexes"),
        ("Collection", "delete_many"),
        ("Collection", "delete_one"),
        ("Collection", "distinct"),
        ("Collection", "drop"),
        ("Collection", "drop_index"),
        ("Collection", "drop_indexes"),
        ("Collection", "estimated_document_count"),
        ("Collection", "find_one_and_delete"),
        ("Collection", "find_one_and_replace"),
        ("Collection", "find_one_and_update"),
        ("Collection", "index_information"),
        ("Collection", "insert_many"),
        ("Collection", "insert_one"),
        ("Collection", "list_indexes", SingleWrap("CommandCursor")),
        ("Collection", "list_search_indexes", SingleWrap("CommandCursor")),
        ("Collection", "options"),
        ("Collection", "rename"),
        ("Collection", "replace_one"),
        ("Collection", "update_many"),
        ("Collection", "update_one"),
        ("Collection", "watch", SingleWrap("ChangeStream")),
        # Cursor
        ("Cursor", "close"),
        ("Cursor", "distinct"),
        ("Cursor", "explain"),
        ("Cursor", "next"),
        ("Cursor", "to_list"),
        # CommandCursor
        ("CommandCursor", "close"),
        ("CommandCursor", "next"),
        ("CommandCursor", "to_list"),
        ("CommandCursor", "try_next"),
        # ChangeStream
        ("ChangeStream", "close"),
        ("ChangeStream", "next"),
        ("ChangeStream", "try_next"),
        # GridFSBucket
        ("GridFSBucket", "delete"),
        ("GridFSBucket", "download_to_stream"),
        ("GridFSBucket", "download_to_stream_by_name"),
        ("GridFSBucket", "open_download_stream"),
        ("GridFSBucket", "open_download_stream_by_name"),
        ("GridFSBucket", "rename"),
        ("GridFSBucket", "upload_from_stream"),
        ("GridFSBucket", "upload_from_stream_with_id"),
    ]
)
