"""
Builds the embedded portfolio corpus from a content source.

Each record is flattened with a fixed per-type template, embedded, and wrapped
with a deterministic id, its type tag and typed metadata. Construction is
all-or-nothing.
"""

from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass
import re
import time
from typing import Any, Dict, List

from ..content.loader import ContentSource
from ..content.models import BlogPost, Education, Experience, GeneralFact, Project, SkillGroup
from ..core.errors import CorpusConstructionError, DimensionMismatchError
from ..util.logging import logger
from .embeddings import EmbeddingGenerator
from .types import (
    BlogMetadata,
    EducationMetadata,
    EmbeddedContent,
    ExperienceMetadata,
    GeneralMetadata,
    ProjectMetadata,
    SkillMetadata,
)

BLOG_PREVIEW_CHARS = 500


@dataclass
class ContentItem:
    """A flattened content record waiting to be embedded."""
    id: str
    type: str
    text: str
    metadata: Dict[str, Any]


def slugify(value: str) -> str:
    return re.sub(r"\s+", "-", value.strip().lower())


def project_text(project: Project) -> str:
    return "\n".join([
        f"Project: {project.title}",
        f"Description: {project.description}",
        f"Long Description: {project.long_description}",
        f"Technologies: {', '.join(t.name for t in project.technologies)}",
        f"Category: {project.category}",
        f"Highlights: {'. '.join(project.highlights)}",
        f"Challenges: {'. '.join(project.challenges)}",
        f"Outcomes: {'. '.join(project.outcomes)}",
    ])


def blog_text(post: BlogPost) -> str:
    return "\n".join([
        f"Blog Post: {post.title}",
        f"Excerpt: {post.excerpt}",
        f"Tags: {', '.join(post.tags)}",
        f"Content Preview: {post.content[:BLOG_PREVIEW_CHARS]}...",
    ])


def skill_text(group: SkillGroup) -> str:
    return "\n".join([
        f"Skill Category: {group.category}",
        f"Technologies: {', '.join(group.skills)}",
        f"Description: {group.description}",
    ])


def experience_text(exp: Experience) -> str:
    return "\n".join([
        f"Position: {exp.title} at {exp.company}",
        f"Period: {exp.period}",
        f"Description: {exp.description}",
        f"Key Achievements: {', '.join(exp.achievements)}",
    ])


def education_text(edu: Education) -> str:
    return "\n".join([
        f"Education: {edu.degree} at {edu.institution}",
        f"Period: {edu.period}",
        f"Description: {edu.description}",
    ])


def collect_content_items(source: ContentSource) -> List[ContentItem]:
    """Flatten every record the source provides, in a fixed order."""
    items = []

    for project in source.get_projects():
        items.append(ContentItem(
            id=f"project-{project.id}",
            type="project",
            text=project_text(project),
            metadata=ProjectMetadata(
                title=project.title,
                slug=project.slug,
                category=project.category,
                technologies=[t.model_dump() for t in project.technologies],
                demo_url=project.demo_url,
                github_url=project.github_url,
            ).to_dict(),
        ))

    # Blog posts have no dedicated type tag
    for post in source.get_blog_posts():
        items.append(ContentItem(
            id=f"blog-{post.slug}",
            type="general",
            text=blog_text(post),
            metadata=BlogMetadata(
                title=post.title,
                slug=post.slug,
                tags=list(post.tags),
                reading_time=post.reading_time,
            ).to_dict(),
        ))

    for group in source.get_skills():
        items.append(ContentItem(
            id=f"skills-{slugify(group.category)}",
            type="skill",
            text=skill_text(group),
            metadata=SkillMetadata(category=group.category, skills=list(group.skills)).to_dict(),
        ))

    for exp in source.get_experience():
        items.append(ContentItem(
            id=f"experience-{slugify(exp.company)}",
            type="experience",
            text=experience_text(exp),
            metadata=ExperienceMetadata(title=exp.title, company=exp.company, period=exp.period).to_dict(),
        ))

    for edu in source.get_education():
        items.append(ContentItem(
            id=f"education-{slugify(edu.institution)}",
            type="education",
            text=education_text(edu),
            metadata=EducationMetadata(degree=edu.degree, institution=edu.institution, period=edu.period).to_dict(),
        ))

    for fact in source.get_general_facts():
        items.append(ContentItem(
            id=f"general-{slugify(fact.topic)}",
            type="general",
            text=fact.content,
            metadata=GeneralMetadata(topic=fact.topic).to_dict(),
        ))

    return items


def build_content_corpus(generator: EmbeddingGenerator, source: ContentSource, max_workers: int = 4) -> List[EmbeddedContent]:
    """
    Embed every content item from `source`.

    Embedding calls run on a pool of at most `max_workers` threads; results
    keep the order of the content items. If reading the source or embedding
    any single item fails, pending calls are cancelled and
    CorpusConstructionError is raised. No partial corpus is returned.

    Args:
        generator: Embedding generator used for every item
        source: Content source to enumerate
        max_workers: Upper bound on concurrent embedding calls

    Returns:
        List of EmbeddedContent in content order
    """
    if max_workers < 1:
        raise ValueError("max_workers must be >= 1")

    start_time = time.time()

    try:
        items = collect_content_items(source)
    except Exception as e:
        logger.log_corpus_build(0, (time.time() - start_time) * 1000, status="failed", details={"error": str(e)})
        raise CorpusConstructionError(f"Failed to read portfolio content: {e}") from e

    if not items:
        logger.log_corpus_build(0, (time.time() - start_time) * 1000, details={"message": "no content found"})
        return []

    executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="corpus-embed")
    try:
        futures = [executor.submit(generator.embed, item.text) for item in items]
        wait(futures, return_when=FIRST_EXCEPTION)

        for item, future in zip(items, futures):
            if future.done() and not future.cancelled() and future.exception() is not None:
                error = future.exception()
                logger.log_corpus_build(len(items), (time.time() - start_time) * 1000, status="failed",
                                        details={"item_id": item.id, "error": str(error)})
                raise CorpusConstructionError(f"Failed to embed {item.id}: {error}") from error

        vectors = [future.result() for future in futures]
    finally:
        executor.shutdown(wait=True, cancel_futures=True)

    dimension = len(vectors[0])
    corpus = []
    for item, vector in zip(items, vectors):
        if len(vector) != dimension:
            raise CorpusConstructionError(f"Inconsistent embedding size for {item.id}") from DimensionMismatchError(dimension, len(vector))
        corpus.append(EmbeddedContent(
            id=item.id,
            type=item.type,
            content=item.text,
            embedding=vector,
            metadata=item.metadata,
        ))

    logger.log_corpus_build(len(corpus), (time.time() - start_time) * 1000, details={"dimension": dimension})
    return corpus
