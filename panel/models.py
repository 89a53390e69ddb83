"""
Prompt model and record normalization
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List


def generate_id() -> str:
    """Return a fresh, globally unique prompt id."""
    return str(uuid.uuid4())


def normalize_tags(value: Any) -> List[str]:
    """
    Coerce a tags value into a list of clean tag strings.

    Accepts a list (items are stringified) or a comma-separated string.
    Each tag is trimmed and loses one leading '#'; empty tags are dropped.
    Order is kept and duplicates are not removed. Anything else yields [].

    Args:
        value: Raw tags value as found in storage or user input

    Returns:
        Normalized list of tags
    """
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, (list, tuple)):
        items = [item for item in value if isinstance(item, (str, int, float))]
    else:
        return []

    tags = []
    for item in items:
        tag = str(item).strip()
        if tag.startswith("#"):
            tag = tag[1:].strip()
        if tag:
            tags.append(tag)
    return tags


def is_well_formed(raw: Any) -> bool:
    """True if raw is a mapping whose id, title and content are all strings."""
    if not isinstance(raw, dict):
        return False
    return all(isinstance(raw.get(key), str) for key in ("id", "title", "content"))


@dataclass
class Prompt:
    """A titled text snippet with optional tags."""
    id: str
    title: str
    content: str
    tags: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.tags = normalize_tags(self.tags)

    @classmethod
    def new(cls, title: str, content: str, tags: Any = None) -> "Prompt":
        """Build a prompt with a freshly generated id."""
        return cls(id=generate_id(), title=title, content=content, tags=tags or [])

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Prompt":
        """
        Build a prompt from a stored or imported mapping.

        Raises:
            ValueError: If id, title or content is not a string
        """
        if not is_well_formed(raw):
            raise ValueError("Prompt record needs string 'id', 'title' and 'content'")
        return cls(
            id=raw["id"],
            title=raw["title"],
            content=raw["content"],
            tags=raw.get("tags", []),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert prompt to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "tags": list(self.tags),
        }

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match on title, content or any tag."""
        needle = term.strip().lower()
        if not needle:
            return True
        if needle in self.title.lower() or needle in self.content.lower():
            return True
        return any(needle in tag.lower() for tag in self.tags)
