"""
Test cases for corpus construction from portfolio content.
"""

import threading

import pytest

from portfolio_search.content.loader import StaticContentSource
from portfolio_search.content.models import (
    BlogPost,
    Education,
    Experience,
    GeneralFact,
    Project,
    SkillGroup,
    Technology,
)
from portfolio_search.core.errors import CorpusConstructionError, EmbeddingServiceError
from portfolio_search.vector.corpus import (
    blog_text,
    build_content_corpus,
    collect_content_items,
    project_text,
    skill_text,
    slugify,
)
from portfolio_search.vector.embeddings import DeterministicHashEmbedding, EmbeddingGenerator


@pytest.fixture
def project():
    return Project(
        id="proj-1",
        slug="portfolio-site",
        title="Portfolio Site",
        description="Personal site with an AI chatbot",
        long_description="Built with Next.js and a semantic search index.",
        technologies=[Technology(name="React", category="framework"), Technology(name="TypeScript", category="language")],
        category="fullstack",
        github_url="https://github.com/example/portfolio",
        highlights=["Chatbot", "Dark mode"],
    )


@pytest.fixture
def source(project):
    return StaticContentSource(
        projects=[project],
        blog_posts=[BlogPost(slug="hello-world", title="Hello World", date="2024-01-02",
                             excerpt="First post", content="x" * 800, tags=["intro", "meta"], reading_time=4)],
        skills=[SkillGroup(category="Machine Learning & AI", skills=["Python", "PyTorch"], description="ML work")],
        experience=[Experience(title="Engineer", company="Tech Innovations Inc.", period="2022 - Present",
                               achievements=["Shipped things"])],
        education=[Education(degree="BSc Computer Science", institution="State University", period="2016 - 2020")],
        general=[GeneralFact(topic="Contact Information", content="Email hello@example.com")],
    )


def test_slugify():
    assert slugify("Machine Learning & AI") == "machine-learning-&-ai"
    assert slugify("  Tech   Innovations Inc. ") == "tech-innovations-inc."


def test_project_text_template(project):
    text = project_text(project)

    assert text.splitlines() == [
        "Project: Portfolio Site",
        "Description: Personal site with an AI chatbot",
        "Long Description: Built with Next.js and a semantic search index.",
        "Technologies: React, TypeScript",
        "Category: fullstack",
        "Highlights: Chatbot. Dark mode",
        "Challenges: ",
        "Outcomes: ",
    ]


def test_blog_text_truncates_content():
    """Test that only a 500 character preview of the post is embedded."""
    post = BlogPost(slug="long", title="Long", date="2024-01-01", excerpt="Long read", content="a" * 800, tags=["x"])
    text = blog_text(post)

    assert "Content Preview: " + "a" * 500 + "..." in text
    assert "a" * 501 not in text


def test_skill_text_template():
    text = skill_text(SkillGroup(category="Backend", skills=["Node.js", "Docker"], description="Servers"))
    assert text == "Skill Category: Backend\nTechnologies: Node.js, Docker\nDescription: Servers"


def test_collect_content_items_ids_and_types(source):
    """Test identifiers and type tags for every content kind, in order."""
    items = collect_content_items(source)

    assert [(item.id, item.type) for item in items] == [
        ("project-proj-1", "project"),
        ("blog-hello-world", "general"),
        ("skills-machine-learning-&-ai", "skill"),
        ("experience-tech-innovations-inc.", "experience"),
        ("education-state-university", "education"),
        ("general-contact-information", "general"),
    ]


def test_collect_content_items_metadata(source):
    items = {item.id: item for item in collect_content_items(source)}

    project_meta = items["project-proj-1"].metadata
    assert project_meta["slug"] == "portfolio-site"
    assert project_meta["category"] == "fullstack"
    assert [t["name"] for t in project_meta["technologies"]] == ["React", "TypeScript"]
    assert project_meta["github_url"] == "https://github.com/example/portfolio"

    assert items["blog-hello-world"].metadata["tags"] == ["intro", "meta"]
    assert items["blog-hello-world"].metadata["reading_time"] == 4
    assert items["skills-machine-learning-&-ai"].metadata["skills"] == ["Python", "PyTorch"]
    assert items["experience-tech-innovations-inc."].metadata["company"] == "Tech Innovations Inc."
    assert items["education-state-university"].metadata["degree"] == "BSc Computer Science"
    assert items["general-contact-information"].metadata["topic"] == "Contact Information"


def test_build_content_corpus(source):
    """Test that every item is embedded with the generator's dimension."""
    generator = EmbeddingGenerator(DeterministicHashEmbedding(dimension=64))
    corpus = build_content_corpus(generator, source, max_workers=3)

    assert len(corpus) == 6
    assert all(len(entry.embedding) == 64 for entry in corpus)
    assert [entry.id for entry in corpus] == [item.id for item in collect_content_items(source)]
    assert corpus[0].content.startswith("Project: Portfolio Site")


def test_build_content_corpus_is_deterministic(source):
    generator = EmbeddingGenerator(DeterministicHashEmbedding(dimension=32))

    first = build_content_corpus(generator, source)
    second = build_content_corpus(generator, source)
    assert [e.embedding for e in first] == [e.embedding for e in second]


def test_build_content_corpus_empty_source():
    generator = EmbeddingGenerator(DeterministicHashEmbedding(dimension=8))
    assert build_content_corpus(generator, StaticContentSource()) == []


def test_build_content_corpus_all_or_nothing(source):
    """Test that a single failed embedding fails the whole build."""

    class FlakyProvider(DeterministicHashEmbedding):
        def embed_text(self, text):
            if text.startswith("Skill Category"):
                raise ConnectionError("embedding service unavailable")
            return super().embed_text(text)

    generator = EmbeddingGenerator(FlakyProvider(dimension=16))

    with pytest.raises(CorpusConstructionError) as exc_info:
        build_content_corpus(generator, source, max_workers=2)

    assert "skills-machine-learning-&-ai" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, EmbeddingServiceError)


def test_build_content_corpus_source_failure():
    class BrokenSource(StaticContentSource):
        def get_projects(self):
            raise OSError("disk unavailable")

    generator = EmbeddingGenerator(DeterministicHashEmbedding(dimension=8))
    with pytest.raises(CorpusConstructionError):
        build_content_corpus(generator, BrokenSource())


def test_build_content_corpus_bounds_concurrency(source):
    """Test that no more than max_workers embedding calls run at once."""
    lock = threading.Lock()
    state = {"active": 0, "peak": 0}
    release = threading.Event()

    class CountingProvider(DeterministicHashEmbedding):
        def embed_text(self, text):
            with lock:
                state["active"] += 1
                state["peak"] = max(state["peak"], state["active"])
            release.wait(0.02)
            with lock:
                state["active"] -= 1
            return super().embed_text(text)

    build_content_corpus(EmbeddingGenerator(CountingProvider(dimension=8)), source, max_workers=2)
    assert 1 <= state["peak"] <= 2


def test_build_content_corpus_rejects_invalid_workers(source):
    generator = EmbeddingGenerator(DeterministicHashEmbedding(dimension=8))
    with pytest.raises(ValueError):
        build_content_corpus(generator, source, max_workers=0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
