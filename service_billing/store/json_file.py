"""JSON file store, the whole dataset in one document."""

import json
import logging
import os
from pathlib import Path
from typing import Any

from service_billing.exceptions import RemoteServiceError
from service_billing.store.base import COLLECTIONS, CONFIG_ID
from service_billing.store.memory import InMemoryBillingStore
from service_billing.store.serialization import from_dict, to_dict

logger = logging.getLogger(__name__)


class JsonFileBillingStore(InMemoryBillingStore):
    """In-memory store persisted to a JSON file after every committed write."""

    def __init__(self, path: str | Path, pretty: bool = False) -> None:
        """Initialize JSON file store.

        Parameters
        ----------
        path : str | Path
            File holding the dataset. Created on first write.
        pretty : bool
            Pretty-print JSON output.
        """
        super().__init__()
        self.path = Path(path)
        self.pretty = pretty
        if self.path.exists():
            self._load()

    def _load(self) -> None:
        try:
            with open(self.path, encoding="utf-8") as f:
                data: dict[str, list[dict[str, Any]]] = json.load(f)
        except (OSError, ValueError) as e:
            raise RemoteServiceError(f"Cannot read store file {self.path}: {e}") from e

        for name, (model, _) in COLLECTIONS.items():
            docs = [from_dict(model, item) for item in data.get(name, [])]
            if name == "config":
                self.collections[name] = {CONFIG_ID: doc for doc in docs}
            else:
                self.collections[name] = {doc.id: doc for doc in docs}

        logger.debug("Loaded %s from %s", self.summary(), self.path)

    def _committed(self) -> None:
        data = {name: [to_dict(doc) for doc in docs.values()] for name, docs in self.collections.items()}
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                if self.pretty:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                else:
                    json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise RemoteServiceError(f"Cannot write store file {self.path}: {e}") from e
