"""
Typed portfolio content records consumed by the corpus builder.
"""

from pydantic import BaseModel, field_validator
from typing import List, Literal, Optional


class Technology(BaseModel):
    name: str
    category: Literal["language", "framework", "tool", "platform"] = "tool"
    icon: Optional[str] = None

    @field_validator('name')
    @classmethod
    def name_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('name cannot be empty')
        return v


class Project(BaseModel):
    id: str
    slug: str
    title: str
    description: str
    long_description: str = ""
    technologies: List[Technology] = []
    category: Literal["frontend", "ml", "ai", "fullstack", "other"] = "other"
    demo_url: Optional[str] = None
    github_url: Optional[str] = None
    featured: bool = False
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    highlights: List[str] = []
    challenges: List[str] = []
    outcomes: List[str] = []

    @field_validator('title', 'description')
    @classmethod
    def text_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('field cannot be empty')
        return v


class BlogPost(BaseModel):
    slug: str
    title: str
    date: str
    excerpt: str
    content: str = ""
    tags: List[str] = []
    reading_time: int = 1
    author: str = ""
    published: bool = True
    featured: bool = False

    @field_validator('title', 'excerpt')
    @classmethod
    def text_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('field cannot be empty')
        return v


class SkillGroup(BaseModel):
    category: str
    skills: List[str]
    description: str = ""


class Experience(BaseModel):
    title: str
    company: str
    period: str
    description: str = ""
    achievements: List[str] = []


class Education(BaseModel):
    degree: str
    institution: str
    period: str
    description: str = ""


class GeneralFact(BaseModel):
    topic: str
    content: str

    @field_validator('content')
    @classmethod
    def content_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('content cannot be empty')
        return v
