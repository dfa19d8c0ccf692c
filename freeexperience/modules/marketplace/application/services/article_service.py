# 📄 File: freeexperience/modules/marketplace/application/services/article_service.py
#
# 🧭 Purpose (Layman Explanation):
# Runs the Resources section: lists the helpful articles, opens one, lets a signed-in
# member write an article and lets only its author change it or give it a cover picture.
#
# 🧪 Purpose (Technical Summary):
# Article read paths are memoized under ``articles`` and ``article:{id}``. Writes check
# authorship, require a title and content, fill a blank excerpt from the content, then
# invalidate the ``article`` prefix so listings and the edited article refetch.
#
# 🔗 Dependencies:
# - DualBackendStore (articles, assets), KeyedAsyncCache, image upload checks
#
# 🔄 Connected Modules / Calls From:
# - Articles API router

from datetime import datetime, timezone
from typing import List, Optional, Tuple

from freeexperience.shared.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from freeexperience.shared.infrastructure.cache import KeyedAsyncCache
from freeexperience.shared.utils.helpers import clean_whitespace, generate_id
from freeexperience.shared.utils.logging import get_logger
from ...domain.models.actor import Actor
from ...domain.models.article import Article, ArticleDraft, derive_excerpt
from ...infrastructure.dual_backend_store import DualBackendStore
from .profile_service import check_image_upload

logger = get_logger(__name__)

ARTICLE_CACHE_PREFIX = "article"
ARTICLES_CACHE_KEY = "articles"


def article_cache_key(article_id: str) -> str:
    return f"article:{article_id}"


def _newest_first(article: Article) -> datetime:
    return article.created_at or datetime.min.replace(tzinfo=timezone.utc)


class ArticleService:
    """Resources section"""

    def __init__(self, store: DualBackendStore, cache: KeyedAsyncCache, articles_ttl: float = 60.0):
        self.store = store
        self.cache = cache
        self.articles_ttl = articles_ttl

    async def list_articles(self, force_refresh: bool = False) -> List[Article]:
        """Every article, newest first."""
        async def fetch() -> List[Article]:
            articles = await self.store.articles.list()
            return sorted(articles, key=_newest_first, reverse=True)

        return await self.cache.get(
            ARTICLES_CACHE_KEY, fetch, ttl=self.articles_ttl, force_refresh=force_refresh
        )

    async def get_article(self, article_id: str, force_refresh: bool = False) -> Optional[Article]:
        return await self.cache.get(
            article_cache_key(article_id),
            lambda: self.store.articles.read(article_id),
            ttl=self.articles_ttl,
            force_refresh=force_refresh,
        )

    async def create_article(self, actor: Actor, draft: ArticleDraft) -> Article:
        """
        Publish an article written by the actor.

        Raises:
            ValidationError: If title or content is missing
        """
        title, content = self._require_text(draft)
        article = Article(
            id="",
            author_id=actor.id,
            title=title,
            content=content,
            excerpt=derive_excerpt(content, draft.excerpt),
            image_url=draft.image_url or None,
        )

        saved = await self.store.articles.write(article)
        self.cache.invalidate(ARTICLE_CACHE_PREFIX)
        logger.log_user_action("create_article", actor.id, resource=f"article:{saved.id}")
        return saved

    async def update_article(self, actor: Actor, article_id: str, draft: ArticleDraft) -> Article:
        """
        Replace the text of an article.

        A draft without an image keeps the current cover.

        Args:
            actor: Current actor, must be the author
            article_id: Article to edit
            draft: Fields as entered

        Raises:
            NotFoundError: If the article does not exist
            PermissionDeniedError: If the actor is not the author
            ValidationError: If title or content is missing
        """
        current = await self._authored_by(actor, article_id)
        title, content = self._require_text(draft)

        article = current.model_copy(update={
            "title": title,
            "content": content,
            "excerpt": derive_excerpt(content, draft.excerpt),
            "image_url": draft.image_url or current.image_url,
        })
        saved = await self.store.articles.write(article)
        self.cache.invalidate(ARTICLE_CACHE_PREFIX)
        logger.log_user_action("update_article", actor.id, resource=f"article:{saved.id}")
        return saved

    async def upload_cover(
        self,
        actor: Actor,
        article_id: str,
        filename: str,
        data: bytes,
        content_type: Optional[str] = None
    ) -> Article:
        """
        Store a cover image and attach it to the article.

        Raises:
            NotFoundError: If the article does not exist
            PermissionDeniedError: If the actor is not the author
            ValidationError: If the file is not an acceptable image
        """
        current = await self._authored_by(actor, article_id)
        content_type, extension = check_image_upload(filename, data, content_type)

        path = f"articles/{generate_id()}.{extension}"
        url = await self.store.assets.upload(path, data, content_type)
        saved = await self.store.articles.write(current.model_copy(update={"image_url": url}))
        self.cache.invalidate(ARTICLE_CACHE_PREFIX)
        logger.log_user_action("upload_article_cover", actor.id, resource=path)
        return saved

    async def _authored_by(self, actor: Actor, article_id: str) -> Article:
        current = await self.store.articles.read(article_id)
        if current is None:
            raise NotFoundError("Статья не найдена", resource_type="article", resource_id=article_id)
        if current.author_id != actor.id:
            raise PermissionDeniedError(
                "У вас нет прав на редактирование этой статьи",
                resource_type="article",
                resource_id=article_id,
                actor_id=actor.id
            )
        return current

    @staticmethod
    def _require_text(draft: ArticleDraft) -> Tuple[str, str]:
        title = clean_whitespace(draft.title)
        content = draft.content.strip()
        if not title or not content:
            raise ValidationError(
                "Заполните все обязательные поля",
                field="title" if not title else "content"
            )
        return title, content
