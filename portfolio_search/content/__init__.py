"""
Portfolio content records and the sources that provide them.
"""

from .models import Technology, Project, BlogPost, SkillGroup, Experience, Education, GeneralFact
from .loader import ContentSource, StaticContentSource, FileContentSource

__all__ = [
    'Technology',
    'Project',
    'BlogPost',
    'SkillGroup',
    'Experience',
    'Education',
    'GeneralFact',
    'ContentSource',
    'StaticContentSource',
    'FileContentSource'
]
