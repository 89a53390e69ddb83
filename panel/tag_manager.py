"""
Tag Manager - Handle prompt tagging operations

Provides tag management over the stored collection:
- Adding/removing tags on prompts
- Listing all tags with usage counts
- Filtering prompts by tags (AND/OR logic)

Tags are compared case-insensitively with any leading '#' ignored, but are
stored exactly as the user typed them (after normalization).
"""

from collections import defaultdict
from typing import Dict, List

from .models import Prompt, normalize_tags
from .prompt_store import PromptStore


def _key(tag: str) -> str:
    return tag.lower()


class TagManager:
    """Manages tags for prompts held by a PromptStore."""

    def __init__(self, store: PromptStore):
        """
        Initialize tag manager.

        Args:
            store: The prompt store to read and update
        """
        self.store = store

    def add_tags(self, prompt_id: str, tags: List[str]) -> List[Prompt]:
        """
        Add tags to a prompt, skipping tags it already has.

        Args:
            prompt_id: The prompt identifier
            tags: List of tags to add

        Returns:
            The updated collection (unchanged if the prompt does not exist)
        """
        prompt = self.store.get(prompt_id)
        if prompt is None:
            return self.store.load()

        existing = {_key(t) for t in prompt.tags}
        for tag in normalize_tags(tags):
            if _key(tag) not in existing:
                prompt.tags.append(tag)
                existing.add(_key(tag))

        return self.store.update(prompt)

    def remove_tags(self, prompt_id: str, tags: List[str]) -> List[Prompt]:
        """
        Remove tags from a prompt.

        Returns:
            The updated collection (unchanged if the prompt does not exist)
        """
        prompt = self.store.get(prompt_id)
        if prompt is None:
            return self.store.load()

        unwanted = {_key(t) for t in normalize_tags(tags)}
        prompt.tags = [t for t in prompt.tags if _key(t) not in unwanted]
        return self.store.update(prompt)

    def get_all_tags_with_counts(self) -> Dict[str, int]:
        """
        Get all tags in the collection with usage counts.

        A prompt carrying the same tag twice counts once.

        Returns:
            Dictionary mapping lowercase tag names to prompt counts
        """
        tag_counts = defaultdict(int)
        for prompt in self.store.load():
            for tag in {_key(t) for t in prompt.tags}:
                tag_counts[tag] += 1
        return dict(tag_counts)

    def filter_by_tags(self, tags: List[str], match_all: bool = False) -> List[Prompt]:
        """
        Filter prompts by tags.

        Args:
            tags: List of tags to filter by
            match_all: If True, prompt must have ALL tags (AND logic)
                      If False, prompt must have ANY tag (OR logic)

        Returns:
            Matching prompts in collection order
        """
        wanted = {_key(t) for t in normalize_tags(tags)}
        if not wanted:
            return []

        matches = []
        for prompt in self.store.load():
            have = {_key(t) for t in prompt.tags}
            if (wanted <= have) if match_all else (wanted & have):
                matches.append(prompt)
        return matches
