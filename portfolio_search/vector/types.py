"""
Records held by the vector store and the projections returned from a search.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

CONTENT_TYPES = frozenset({"project", "skill", "experience", "education", "general"})


@dataclass
class EmbeddedContent:
    """One indexed unit of portfolio knowledge."""

    id: str
    """Unique identifier within a store, e.g. project-<slug>"""

    type: str
    """One of CONTENT_TYPES"""

    content: str
    """Plain-text representation that was embedded"""

    embedding: List[float]
    """Fixed-length vector produced by the embedding model"""

    metadata: Dict[str, Any] = field(default_factory=dict)
    """Provenance fields, passed through to search results verbatim"""

    def __post_init__(self):
        if not self.id:
            raise ValueError("id cannot be empty")
        if self.type not in CONTENT_TYPES:
            raise ValueError(f"type must be one of: {sorted(CONTENT_TYPES)}")
        if not self.content or not self.content.strip():
            raise ValueError("content cannot be empty")
        if self.embedding is None or len(self.embedding) == 0:
            raise ValueError("embedding cannot be empty")
        if self.metadata is None:
            self.metadata = {}

    @property
    def dimension(self) -> int:
        return len(self.embedding)


@dataclass
class SearchResult:
    """A ranked match; the raw embedding is dropped."""

    id: str
    content: str
    metadata: Dict[str, Any]
    type: str
    score: float
    """Cosine similarity against the query, in [-1, 1]"""

    @classmethod
    def from_content(cls, item: EmbeddedContent, score: float) -> "SearchResult":
        return cls(
            id=item.id,
            content=item.content,
            metadata=item.metadata,
            type=item.type,
            score=float(score),
        )


# Typed metadata per content type. The corpus builder serialises these with
# to_dict() so the store only ever carries plain mappings.

@dataclass
class ProjectMetadata:
    title: str
    slug: str
    category: str
    technologies: List[Dict[str, Any]]
    demo_url: Optional[str] = None
    github_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class BlogMetadata:
    title: str
    slug: str
    tags: List[str]
    reading_time: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class SkillMetadata:
    category: str
    skills: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ExperienceMetadata:
    title: str
    company: str
    period: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class EducationMetadata:
    degree: str
    institution: str
    period: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class GeneralMetadata:
    topic: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
