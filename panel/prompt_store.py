"""
Prompt Store - Core storage layer for prompts

Owns the ordered prompt collection kept under a single key of a key-value
backend. The store holds no state between calls: every operation reads the
persisted collection, applies its change and writes the whole collection
back, then returns the fresh collection so the caller can redraw without a
second load.

Import policy is merge-by-id: imported records overwrite existing records
with the same id (keeping the existing position), new ids are appended in
file order, and records only present locally are kept.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from .config import EXPORT_FILENAME, STORAGE_KEY
from .errors import NotASequence, NothingToExport, ParseError, StorageWriteError
from .file_reader import ImportSource, read_text
from .models import Prompt, is_well_formed


logger = logging.getLogger(__name__)

PromptLike = Union[Prompt, Dict[str, Any]]


class PromptStore:
    """Manages prompt storage and retrieval."""

    def __init__(self, backend, key: str = STORAGE_KEY):
        """
        Initialize prompt store.

        Args:
            backend: Key-value backend (see panel.backends)
            key: Storage key holding the serialized collection
        """
        self.backend = backend
        self.key = key

    # Persistence

    def load(self) -> List[Prompt]:
        """
        Load the persisted collection.

        Never raises. A missing key yields an empty list; unparsable data or
        a value that is not an array is logged, cleared from storage, and
        also yields an empty list. Individual malformed records are skipped
        with a warning; the rest of the collection is kept.

        Returns:
            The collection in stored order, with tags normalized
        """
        raw = self.backend.get(self.key)
        if raw is None:
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Stored prompts are not valid JSON ({e}), starting empty")
            self._clear_corrupted()
            return []

        if not isinstance(data, list):
            logger.warning("Stored prompts are not an array, starting empty")
            self._clear_corrupted()
            return []

        prompts = []
        seen = set()
        for position, item in enumerate(data):
            if not is_well_formed(item):
                logger.warning(f"Skipping malformed stored prompt at position {position}")
                continue
            if item["id"] in seen:
                logger.warning(f"Ignoring duplicate stored prompt id: {item['id']}")
                continue
            seen.add(item["id"])
            prompts.append(Prompt.from_dict(item))
        return prompts

    def _clear_corrupted(self) -> None:
        try:
            self.backend.remove(self.key)
        except StorageWriteError as e:
            logger.error(f"Could not clear corrupted prompt data: {e}")

    def save(self, prompts: Iterable[PromptLike]) -> List[Prompt]:
        """
        Overwrite the persisted collection.

        Args:
            prompts: The full collection to store

        Returns:
            The stored collection

        Raises:
            StorageWriteError: If the backend rejects the write; the previous
                value is left in place
            ValueError: If a record lacks a string id, title or content;
                nothing is written
        """
        collection = [self._coerce(p) for p in prompts]
        payload = json.dumps([p.to_dict() for p in collection], indent=2, ensure_ascii=False)
        try:
            self.backend.set(self.key, payload)
        except StorageWriteError as e:
            logger.error(f"Error saving prompts: {e}")
            raise
        return collection

    @staticmethod
    def _coerce(prompt: PromptLike) -> Prompt:
        """
        Validate a record and normalize its tags.

        Fields of a Prompt may have been reassigned after creation, so
        instances are checked the same way as plain mappings.

        Raises:
            ValueError: If id, title or content is not a string
        """
        if isinstance(prompt, Prompt):
            prompt = {"id": prompt.id, "title": prompt.title, "content": prompt.content, "tags": prompt.tags}
        return Prompt.from_dict(prompt)

    # CRUD

    def get(self, prompt_id: str) -> Optional[Prompt]:
        """Return the prompt with this id, or None."""
        for prompt in self.load():
            if prompt.id == prompt_id:
                return prompt
        return None

    def create(self, title: str, content: str, tags: Any = None) -> List[Prompt]:
        """
        Create a prompt with a fresh id and append it to the collection.

        Args:
            title: Prompt title
            content: Prompt text
            tags: List of tags or comma-separated string

        Returns:
            The updated collection; the new prompt is last
        """
        prompt = Prompt.new(title, content, tags)
        prompts = self.load()
        prompts.append(prompt)
        logger.info(f"Created prompt {prompt.id}")
        return self.save(prompts)

    def update(self, record: PromptLike) -> List[Prompt]:
        """
        Replace the prompt with the same id, keeping its position.

        An unknown id leaves the collection untouched and is not an error.

        Args:
            record: The full replacement record

        Returns:
            The (possibly unchanged) collection

        Raises:
            ValueError: If the record lacks a string id, title or content
        """
        updated = self._coerce(record)
        prompts = self.load()
        for index, prompt in enumerate(prompts):
            if prompt.id == updated.id:
                prompts[index] = updated
                logger.info(f"Updated prompt {updated.id}")
                return self.save(prompts)

        logger.debug(f"Update ignored, no prompt with id {updated.id}")
        return prompts

    def delete(self, prompt_id: str) -> List[Prompt]:
        """
        Delete a prompt; an unknown id is a no-op.

        Returns:
            The updated collection
        """
        prompts = self.load()
        remaining = [p for p in prompts if p.id != prompt_id]
        if len(remaining) == len(prompts):
            logger.debug(f"Delete ignored, no prompt with id {prompt_id}")
            return prompts
        logger.info(f"Deleted prompt {prompt_id}")
        return self.save(remaining)

    def reorder(self, ordered_ids: Iterable[str]) -> List[Prompt]:
        """
        Rebuild the collection in the given id order.

        Ids not in the collection are ignored. Prompts whose id is not listed
        are dropped, so callers must pass the complete id list unless they
        mean to prune.

        Args:
            ordered_ids: Prompt ids in the desired order

        Returns:
            The reordered collection
        """
        by_id = {p.id: p for p in self.load()}
        reordered = []
        placed = set()
        for prompt_id in ordered_ids:
            if prompt_id in by_id and prompt_id not in placed:
                reordered.append(by_id[prompt_id])
                placed.add(prompt_id)

        dropped = set(by_id) - placed
        if dropped:
            logger.info(f"Reorder dropped {len(dropped)} prompt(s): {', '.join(sorted(dropped))}")
        return self.save(reordered)

    def search(self, term: str = "") -> List[Prompt]:
        """
        Filter prompts by a search term.

        Matches case-insensitively against title, content and tags. An empty
        term returns everything. Collection order is kept.
        """
        return [p for p in self.load() if p.matches(term)]

    # Export / import

    def export(self) -> str:
        """
        Serialize the persisted collection for download.

        Returns:
            Pretty-printed JSON array

        Raises:
            NothingToExport: If there are no prompts
        """
        prompts = self.load()
        if not prompts:
            raise NothingToExport("There are no prompts to export!")
        return json.dumps([p.to_dict() for p in prompts], indent=2, ensure_ascii=False)

    def write_export(self, directory: Union[str, Path]) -> Path:
        """
        Write the export document into a directory.

        Returns:
            Path of the written prompts_export.json
        """
        data = self.export()
        target = Path(directory) / EXPORT_FILENAME
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(data, encoding="utf-8")
        logger.info(f"Exported prompts to {target}")
        return target

    def import_text(self, text: str) -> List[Prompt]:
        """
        Merge a serialized collection into the stored one.

        Imported prompts replace stored prompts with the same id in place;
        new ids are appended in file order. Records whose id, title or
        content is not a string are skipped with a warning. Within one file
        the last record for an id wins.

        Args:
            text: JSON array of prompt objects

        Returns:
            The merged collection

        Raises:
            ParseError: If text is not valid JSON
            NotASequence: If the JSON value is not an array
            StorageWriteError: If the merged collection cannot be saved
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseError(f"Error reading or parsing the JSON file: {e}") from e

        if not isinstance(data, list):
            raise NotASequence("The JSON file does not contain a valid array of prompts.")

        imported: Dict[str, Prompt] = {}
        skipped = 0
        for position, item in enumerate(data):
            if not is_well_formed(item):
                skipped += 1
                logger.warning(f"Skipping malformed prompt at position {position}")
                continue
            imported[item["id"]] = Prompt.from_dict(item)

        merged = []
        for prompt in self.load():
            merged.append(imported.pop(prompt.id, prompt))
        merged.extend(imported.values())

        result = self.save(merged)
        logger.info(
            f"Imported {len(data) - skipped} prompt(s)"
            + (f", skipped {skipped} malformed" if skipped else "")
        )
        return result

    async def import_file(self, source: Union[ImportSource, str, Path, None]) -> List[Prompt]:
        """
        Read an import file and merge it into the stored collection.

        Raises:
            ImportFailure: Any of NotAFile, WrongMimeOrFormat, ReadError,
                ParseError or NotASequence
            StorageWriteError: If the merged collection cannot be saved
        """
        text = await read_text(source)
        return self.import_text(text)
