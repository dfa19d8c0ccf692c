# 📄 File: freeexperience/modules/marketplace/presentation/api/schemas/article_schemas.py
#
# 🧭 Purpose (Layman Explanation):
# Describes the article form an author fills in, the article page and the short article
# cards shown in the Resources list.
#
# 🧪 Purpose (Technical Summary):
# Resources schemas: the write form maps onto ArticleDraft; the listing carries cards
# without the article body.
#
# 🔗 Dependencies:
# - pydantic: Request validation and response serialization
#
# 🔄 Connected Modules / Calls From:
# Articles API router

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ....domain.models.article import Article, ArticleDraft


class ArticleWriteRequest(BaseModel):
    title: str = Field(..., max_length=300)
    content: str = Field(..., max_length=100000)
    excerpt: str = Field("", max_length=500)
    image_url: Optional[str] = None

    def to_draft(self) -> ArticleDraft:
        return ArticleDraft(**self.model_dump())


class ArticleCardResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    excerpt: str
    image_url: Optional[str] = None

    @classmethod
    def from_domain(cls, article: Article) -> "ArticleCardResponse":
        return cls(id=article.id, title=article.title, excerpt=article.card_excerpt, image_url=article.image_url)


class ArticleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    author_id: str
    title: str
    content: str
    excerpt: str
    image_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, article: Article) -> "ArticleResponse":
        return cls.model_validate(article)


class ArticleListResponse(BaseModel):
    items: List[ArticleCardResponse]
    total: int
