"""In-memory billing store."""

import copy
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Iterator

from service_billing.store.base import COLLECTIONS, DocumentStore


@dataclass
class InMemoryBillingStore(DocumentStore):
    """Dict-backed store, one mapping of id to model per collection.

    ``atomic()`` snapshots every collection and restores the snapshot when
    the block raises.
    """

    collections: dict[str, dict[str, Any]] = field(
        default_factory=lambda: {name: {} for name in COLLECTIONS}
    )
    _depth: int = field(default=0, repr=False)

    def _all(self, collection: str) -> list[Any]:
        return list(self.collections[collection].values())

    def _find(self, collection: str, doc_id: str) -> Any | None:
        return self.collections[collection].get(doc_id)

    def _put(self, collection: str, doc_id: str, doc: Any) -> None:
        self.collections[collection][doc_id] = doc
        if not self._depth:
            self._committed()

    def _remove(self, collection: str, doc_id: str) -> bool:
        existed = self.collections[collection].pop(doc_id, None) is not None
        if existed and not self._depth:
            self._committed()
        return existed

    @contextmanager
    def atomic(self) -> Iterator[None]:
        snapshot = copy.deepcopy(self.collections)
        self._depth += 1
        try:
            yield
            if self._depth == 1:
                self._committed()
        except BaseException:
            self.collections = snapshot
            raise
        finally:
            self._depth -= 1

    def _committed(self) -> None:
        """Called after every write that is not inside an ``atomic()`` block."""
