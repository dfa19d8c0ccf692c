# 📄 File: freeexperience/modules/marketplace/domain/models/article.py
#
# 🧭 Purpose (Layman Explanation):
# Describes a helpful article in the Resources section: its title, text, a short teaser
# for the card, an optional cover picture and who wrote it.
#
# 🧪 Purpose (Technical Summary):
# Article and ArticleDraft domain models. The card excerpt falls back to the first
# EXCERPT_LENGTH characters of the content with line breaks flattened.
#
# 🔗 Dependencies:
# pydantic, datetime, typing
#
# 🔄 Connected Modules / Calls From:
# ArticleService, article stores, record mappers, API schemas

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

EXCERPT_LENGTH = 150


def derive_excerpt(content: str, excerpt: Optional[str] = None) -> str:
    """
    Card teaser for an article.

    Args:
        content: Article body
        excerpt: Teaser as entered; used when non-blank

    Returns:
        str: The teaser, or the start of the body followed by "..."
    """
    if excerpt and excerpt.strip():
        return excerpt.strip()
    flattened = content.strip()[:EXCERPT_LENGTH].replace("\n", " ")
    return f"{flattened}..."


class ArticleDraft(BaseModel):
    """Fields an author submits when writing or editing an article"""
    title: str = ""
    content: str = ""
    excerpt: str = ""
    image_url: Optional[str] = None


class Article(BaseModel):
    """An article in the Resources section"""
    id: str
    author_id: str = ""
    title: str = ""
    content: str = ""
    excerpt: str = ""
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def card_excerpt(self) -> str:
        return self.excerpt or self.title
