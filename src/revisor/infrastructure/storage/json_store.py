"""JSON file store: the collection lives under one named key of a JSON document."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from revisor.domain.constants import STORAGE_KEY
from revisor.domain.models import RevisionItem
from revisor.domain.ports import ItemStore, StorageError

from .records import RevisionItemRecord

logger = logging.getLogger(__name__)


class JsonFileStore(ItemStore):
    """
    Stores the item list as `{"<key>": [record, ...]}` in a JSON file.

    Other top-level keys in the document are preserved on save, so several
    named slots can share one file.
    """

    def __init__(self, path: Path, key: str = STORAGE_KEY):
        self.path = Path(path)
        self.key = key

    def load(self) -> list[RevisionItem]:
        document = self._read_document()
        raw_items = document.get(self.key)
        if raw_items is None:
            return []
        if not isinstance(raw_items, list):
            logger.warning(f"Ignoring '{self.key}' in {self.path}: expected a list")
            return []

        items = []
        for index, raw in enumerate(raw_items):
            try:
                items.append(RevisionItemRecord.model_validate(raw).to_domain())
            except ValidationError as e:
                logger.warning(
                    f"Skipping unreadable item #{index} in {self.path}: "
                    f"{e.error_count()} validation error(s)"
                )
        return items

    def save(self, items: list[RevisionItem]) -> None:
        document = self._read_document()
        document[self.key] = [RevisionItemRecord.from_domain(i).to_json_dict() for i in items]

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # Write to a sibling temp file, then swap it in
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(document, fh, indent=2, ensure_ascii=False)
                    fh.write("\n")
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e

        logger.debug(f"[write] {self.path}: {len(items)} item(s) under '{self.key}'")

    def _read_document(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not read {self.path}: {e}")
            return {}
        if not text.strip():
            return {}
        try:
            document = json.loads(text)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring corrupt data file {self.path}: {e}")
            return {}
        if not isinstance(document, dict):
            logger.warning(f"Ignoring {self.path}: top-level JSON is not an object")
            return {}
        return document
