"""
Content sources: where projects, blog posts and profile facts come from.

The corpus builder only reads from a source; it never writes back.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
import json
import math
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..core.errors import ContentLoadError
from ..util.logging import logger
from .defaults import DEFAULT_EDUCATION, DEFAULT_EXPERIENCE, DEFAULT_SKILLS, default_general_facts
from .models import BlogPost, Education, Experience, GeneralFact, Project, SkillGroup

WORDS_PER_MINUTE = 200

# Tried in order after ISO 8601; %m and %d also accept unpadded values
DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%B %d, %Y", "%b %d, %Y")


class ContentSource(ABC):
    """Read-only access to structured portfolio content."""

    @abstractmethod
    def get_projects(self) -> List[Project]:
        pass

    @abstractmethod
    def get_blog_posts(self) -> List[BlogPost]:
        pass

    @abstractmethod
    def get_skills(self) -> List[SkillGroup]:
        pass

    @abstractmethod
    def get_experience(self) -> List[Experience]:
        pass

    @abstractmethod
    def get_education(self) -> List[Education]:
        pass

    @abstractmethod
    def get_general_facts(self) -> List[GeneralFact]:
        pass


class StaticContentSource(ContentSource):
    """Content held in memory. Unspecified sections default to empty."""

    def __init__(self, projects: List[Project] = None, blog_posts: List[BlogPost] = None,
                 skills: List[SkillGroup] = None, experience: List[Experience] = None,
                 education: List[Education] = None, general: List[GeneralFact] = None):
        self.projects = list(projects or [])
        self.blog_posts = list(blog_posts or [])
        self.skills = list(skills or [])
        self.experience = list(experience or [])
        self.education = list(education or [])
        self.general = list(general or [])

    def get_projects(self) -> List[Project]:
        return list(self.projects)

    def get_blog_posts(self) -> List[BlogPost]:
        return list(self.blog_posts)

    def get_skills(self) -> List[SkillGroup]:
        return list(self.skills)

    def get_experience(self) -> List[Experience]:
        return list(self.experience)

    def get_education(self) -> List[Education]:
        return list(self.education)

    def get_general_facts(self) -> List[GeneralFact]:
        return list(self.general)


def estimate_reading_time(text: str) -> int:
    """Minutes to read `text` at 200 words per minute, at least one."""
    word_count = len(text.split())
    return max(1, math.ceil(word_count / WORDS_PER_MINUTE))


def parse_post_date(value: str) -> datetime:
    """
    Parse a blog post date for ordering.

    Timezone-aware values are converted to naive UTC so all results compare.
    Unparseable dates map to datetime.min and sort after every dated post.
    """
    text = value.strip()
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        parsed = None
        for fmt in DATE_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        logger.warning(f"Unrecognised blog post date '{value}', sorting it last")
        return datetime.min
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


class FileContentSource(ContentSource):
    """
    Content loaded from a directory laid out as:

        <content_dir>/projects/<slug>.json
        <content_dir>/blog/<slug>.json
        <content_dir>/profile.json   (optional: skills, experience, education, general)

    Missing directories yield no content. Records that fail validation are
    skipped with a warning. Files that cannot be read raise ContentLoadError.
    """

    def __init__(self, content_dir: str, owner: str = "the portfolio owner", contact_email: str = ""):
        self.content_dir = Path(content_dir)
        self.owner = owner
        self.contact_email = contact_email
        self._profile: Optional[Dict[str, Any]] = None

    def _read_json(self, path: Path) -> Optional[Any]:
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise ContentLoadError(f"Failed to read {path}: {e}") from e

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Skipping {path} due to invalid JSON: {e}")
            return None

    def _read_record(self, path: Path) -> Optional[Dict[str, Any]]:
        """A JSON object from `path`, or None when the file holds anything else."""
        data = self._read_json(path)
        if data is None:
            return None
        if not isinstance(data, dict):
            logger.warning(f"Skipping {path}: expected a JSON object, got {type(data).__name__}")
            return None
        return data

    def _json_files(self, subdir: str) -> List[Path]:
        directory = self.content_dir / subdir
        if not directory.is_dir():
            return []
        return sorted(directory.glob("*.json"))

    def get_projects(self) -> List[Project]:
        projects = []
        for path in self._json_files("projects"):
            data = self._read_record(path)
            if data is None:
                continue
            slug = path.stem
            data.setdefault("slug", slug)
            data.setdefault("id", slug)
            try:
                projects.append(Project(**data))
            except (ValidationError, TypeError) as e:
                logger.warning(f"Skipping project {slug} due to validation error: {e}")
        return projects

    def get_blog_posts(self) -> List[BlogPost]:
        posts = []
        for path in self._json_files("blog"):
            data = self._read_record(path)
            if data is None:
                continue
            slug = path.stem
            data.setdefault("slug", slug)
            if "reading_time" not in data:
                content = data.get("content")
                data["reading_time"] = estimate_reading_time(content if isinstance(content, str) else "")
            try:
                post = BlogPost(**data)
            except (ValidationError, TypeError) as e:
                logger.warning(f"Blog post {slug} is missing required fields: {e}")
                continue
            if post.published:
                posts.append(post)

        # Newest first
        return sorted(posts, key=lambda p: parse_post_date(p.date), reverse=True)

    def _load_profile(self) -> Dict[str, Any]:
        if self._profile is None:
            path = self.content_dir / "profile.json"
            data = self._read_json(path) if path.is_file() else None
            self._profile = data if isinstance(data, dict) else {}
        return self._profile

    def _profile_section(self, key: str, model, default):
        profile = self._load_profile()
        if key not in profile:
            return list(default)
        try:
            return [model(**entry) for entry in profile[key]]
        except (ValidationError, TypeError) as e:
            logger.warning(f"Invalid '{key}' section in profile.json, using defaults: {e}")
            return list(default)

    def get_skills(self) -> List[SkillGroup]:
        return self._profile_section("skills", SkillGroup, DEFAULT_SKILLS)

    def get_experience(self) -> List[Experience]:
        return self._profile_section("experience", Experience, DEFAULT_EXPERIENCE)

    def get_education(self) -> List[Education]:
        return self._profile_section("education", Education, DEFAULT_EDUCATION)

    def get_general_facts(self) -> List[GeneralFact]:
        return self._profile_section("general", GeneralFact, default_general_facts(self.owner, self.contact_email))
