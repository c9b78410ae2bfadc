"""In-memory stand-in for the document index."""

import copy
import threading
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pzcommon.core.errors import DocumentIndexError
from pzcommon.core.models import IndexResponse
from pzcommon.core.response import JsonPagination, PaginationOrder


@dataclass(frozen=True)
class SearchHit:
    id: str
    source: dict[str, Any]
    type: str = ""


@dataclass(frozen=True)
class SearchResult:
    """Page of hits plus the number of documents that matched."""

    total_hits: int
    hits: list[SearchHit] = field(default_factory=list)


class MockIndex:
    """In-memory implementation of IndexPort.

    Documents live in a dict of types, each a dict of id to document.
    Documents are deep-copied in and out so callers cannot alias them.

    Example:
        ```python
        index = MockIndex("logs")
        index.create()
        writer = IndexWriter(index, type="syslog")
        ```
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._exists = False
        self._items: dict[str, dict[str, dict[str, Any]]] = {}
        self._versions: dict[tuple[str, str], int] = {}
        self._lock = threading.Lock()

    def create(self) -> None:
        """Create the index. Creating an existing index is a no-op."""
        with self._lock:
            self._exists = True

    def delete(self) -> None:
        """Drop the index and everything in it."""
        with self._lock:
            self._exists = False
            self._items.clear()
            self._versions.clear()

    def index_exists(self) -> bool:
        with self._lock:
            return self._exists

    def type_exists(self, type: str) -> bool:
        with self._lock:
            return type in self._items

    def item_exists(self, type: str, id: str) -> bool:
        with self._lock:
            return id in self._items.get(type, {})

    def post_data(
        self, type: str, id: str, document: Mapping[str, Any]
    ) -> IndexResponse:
        """Store a document, creating its type on first use.

        Args:
            type: Document type.
            id: Document id; empty assigns a fresh one.
            document: JSON-compatible mapping.

        Returns:
            The index's answer. ``version`` counts writes to this id.

        Raises:
            DocumentIndexError: If the index has not been created.
        """
        with self._lock:
            if not self._exists:
                raise DocumentIndexError(f"Index does not exist: {self.name}")
            doc_id = id or uuid.uuid4().hex
            documents = self._items.setdefault(type, {})
            created = doc_id not in documents
            documents[doc_id] = copy.deepcopy(dict(document))
            version = self._versions.get((type, doc_id), 0) + 1
            self._versions[(type, doc_id)] = version

        return IndexResponse(
            created=created, id=doc_id, index=self.name, type=type, version=version
        )

    def get_by_id(self, type: str, id: str) -> dict[str, Any]:
        """Return a copy of a stored document.

        Raises:
            DocumentIndexError: If there is no such document.
        """
        with self._lock:
            try:
                return copy.deepcopy(self._items[type][id])
            except KeyError:
                raise DocumentIndexError(f"GetById: not found: {id}") from None

    def delete_by_id(self, type: str, id: str) -> bool:
        """Remove a document; return whether it was there."""
        with self._lock:
            documents = self._items.get(type, {})
            if id not in documents:
                return False
            del documents[id]
            self._versions.pop((type, id), None)
            return True

    def filter_by_match_all(
        self, type: str = "", pagination: JsonPagination | None = None
    ) -> SearchResult:
        """Return one page of all documents of a type, ordered by id.

        Args:
            type: Document type; empty matches every type.
            pagination: Page to return; the first page of 10 when omitted.
                Only ``order`` is honored for sorting, by document id.

        Returns:
            The page and the total number of matching documents.
        """
        pagination = pagination or JsonPagination()
        with self._lock:
            types = [type] if type else list(self._items)
            # keyed by (type, id): the same id may live under several types
            hits = [
                SearchHit(id=doc_id, source=copy.deepcopy(document), type=doc_type)
                for doc_type in types
                for doc_id, document in self._items.get(doc_type, {}).items()
            ]

        hits.sort(
            key=lambda hit: (hit.id, hit.type),
            reverse=pagination.order is PaginationOrder.DESCENDING,
        )
        page = hits[pagination.start_index : pagination.end_index]
        return SearchResult(total_hits=len(hits), hits=page)
