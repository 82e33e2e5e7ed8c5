"""Shared fixtures: an in-memory stand-in for the MongoDB database handle.

Only the calls made by the repositories are supported. Writes issued inside a
transaction are buffered on the session and become visible on commit.
"""

from typing import Any, Dict, List, Optional

import pytest
from pymongo.errors import PyMongoError


def _matches(document: Dict[str, Any], query: Dict[str, Any]) -> bool:
    for key, condition in query.items():
        if key == "$and":
            if not all(_matches(document, sub) for sub in condition):
                return False
            continue
        if key == "$or":
            if not any(_matches(document, sub) for sub in condition):
                return False
            continue
        value = document.get(key)
        if isinstance(condition, dict):
            if "$all" in condition:
                if not isinstance(value, list) or not all(
                    item in value for item in condition["$all"]
                ):
                    return False
            if "$in" in condition and value not in condition["$in"]:
                return False
        elif isinstance(value, list):
            if condition not in value:
                return False
        elif value != condition:
            return False
    return True


class FakeResult:
    def __init__(self, matched_count: int = 0, deleted_count: int = 0) -> None:
        self.matched_count = matched_count
        self.deleted_count = deleted_count


class FakeCursor:
    def __init__(
        self,
        documents: List[Dict[str, Any]],
        scan_error: Optional[PyMongoError] = None,
        close_error: Optional[PyMongoError] = None,
    ) -> None:
        self.documents = documents
        self.scan_error = scan_error
        self.close_error = close_error
        self.closed = False

    def __iter__(self):  # type: ignore[no-untyped-def]
        for document in self.documents:
            if self.scan_error is not None:
                raise self.scan_error
            yield dict(document)

    def close(self) -> None:
        self.closed = True
        if self.close_error is not None:
            raise self.close_error

    def __enter__(self) -> "FakeCursor":
        return self

    def __exit__(self, *exc_info: Any) -> bool:
        self.close()
        return False


class FakeCollection:
    def __init__(self, name: str) -> None:
        self.name = name
        self.documents: List[Dict[str, Any]] = []
        self.errors: Dict[str, PyMongoError] = {}
        self.cursors: List[FakeCursor] = []
        self.cursor_errors: Dict[str, PyMongoError] = {}
        self.calls: List[str] = []
        self.indexes: List[Any] = []

    def _fail(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.errors:
            raise self.errors[operation]

    def _write(self, documents: List[Dict[str, Any]], session: Any) -> None:
        if session is not None and session.in_transaction:
            session.pending.append((self, documents))
        else:
            self.documents.extend(documents)

    def insert_one(self, document: Dict[str, Any], session: Any = None) -> None:
        self._fail("insert_one")
        self._write([dict(document)], session)

    def insert_many(self, documents: List[Dict[str, Any]], session: Any = None) -> None:
        self._fail("insert_many")
        self._write([dict(document) for document in documents], session)

    def find_one(self, query: Dict[str, Any], projection: Any = None) -> Optional[Dict[str, Any]]:
        self._fail("find_one")
        for document in self.documents:
            if _matches(document, query):
                return dict(document, _id="object-id")
        return None

    def find(self, query: Dict[str, Any]) -> FakeCursor:
        self._fail("find")
        cursor = FakeCursor(
            [d for d in self.documents if _matches(d, query)],
            scan_error=self.cursor_errors.get("scan"),
            close_error=self.cursor_errors.get("close"),
        )
        self.cursors.append(cursor)
        return cursor

    def update_one(
        self, query: Dict[str, Any], update: Dict[str, Any], upsert: bool = False
    ) -> FakeResult:
        self._fail("update_one")
        for document in self.documents:
            if _matches(document, query):
                for field, value in update.get("$set", {}).items():
                    document[field] = value
                for field, value in update.get("$max", {}).items():
                    document[field] = max(document.get(field, value), value)
                return FakeResult(matched_count=1)
        if upsert:
            self.documents.append(dict(update.get("$set", {})))
        return FakeResult(matched_count=0)

    def delete_one(self, query: Dict[str, Any]) -> FakeResult:
        self._fail("delete_one")
        for index, document in enumerate(self.documents):
            if _matches(document, query):
                del self.documents[index]
                return FakeResult(deleted_count=1)
        return FakeResult(deleted_count=0)

    def create_indexes(self, indexes: List[Any]) -> None:
        self.indexes.extend(indexes)


class FakeSession:
    def __init__(self, errors: Dict[str, PyMongoError]) -> None:
        self.errors = errors
        self.in_transaction = False
        self.pending: List[Any] = []
        self.transaction_options: Dict[str, Any] = {}
        self.calls: List[str] = []
        self.ended = False

    def _fail(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.errors:
            raise self.errors[operation]

    def start_transaction(self, **options: Any) -> None:
        self._fail("start_transaction")
        self.transaction_options = options
        self.in_transaction = True

    def commit_transaction(self) -> None:
        # Like the driver, a commit attempt leaves the transaction finalized.
        self.in_transaction = False
        self._fail("commit_transaction")
        for collection, documents in self.pending:
            collection.documents.extend(documents)
        self.pending = []

    def abort_transaction(self) -> None:
        # The driver swallows OperationFailure and ConnectionFailure here.
        self._fail("abort_transaction")
        self.in_transaction = False
        self.pending = []

    def __enter__(self) -> "FakeSession":
        return self

    def __exit__(self, *exc_info: Any) -> bool:
        self.ended = True
        self.in_transaction = False
        self.pending = []
        return False


class FakeClient:
    def __init__(self) -> None:
        self.session_errors: Dict[str, PyMongoError] = {}
        self.start_session_error: Optional[PyMongoError] = None
        self.sessions: List[FakeSession] = []
        self.session_options: List[Dict[str, Any]] = []

    def start_session(self, **options: Any) -> FakeSession:
        if self.start_session_error is not None:
            raise self.start_session_error
        self.session_options.append(options)
        session = FakeSession(self.session_errors)
        self.sessions.append(session)
        return session


class FakeDatabase:
    def __init__(self) -> None:
        self.client = FakeClient()
        self.collections: Dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()
