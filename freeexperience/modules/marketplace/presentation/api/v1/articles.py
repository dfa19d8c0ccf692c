# 📄 File: freeexperience/modules/marketplace/presentation/api/v1/articles.py
#
# 🧭 Purpose (Layman Explanation):
# Web endpoints for the Resources section: read the articles, write one, edit your own
# and upload its cover picture.
#
# 🧪 Purpose (Technical Summary):
# FastAPI routes over ArticleService. Reading is public; writing needs a signed-in
# actor and editing is author-only. Covers use multipart form data.
#
# 🔗 Dependencies:
# - FastAPI (UploadFile via python-multipart), ArticleService, article schemas
#
# 🔄 Connected Modules / Calls From:
# - API v1 router

from fastapi import APIRouter, Depends, File, Path, UploadFile, status

from freeexperience.shared.core.exceptions import NotFoundError
from ....application.services import ArticleService
from ....domain.models.actor import Actor
from ...dependencies import get_article_service, get_current_actor
from ..schemas.article_schemas import (
    ArticleCardResponse,
    ArticleListResponse,
    ArticleResponse,
    ArticleWriteRequest,
)

articles_router = APIRouter()


@articles_router.get("", response_model=ArticleListResponse, summary="List articles")
async def list_articles(
    articles: ArticleService = Depends(get_article_service)
) -> ArticleListResponse:
    items = await articles.list_articles()
    return ArticleListResponse(items=[ArticleCardResponse.from_domain(a) for a in items], total=len(items))


@articles_router.post(
    "",
    response_model=ArticleResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Publish an article"
)
async def create_article(
    request: ArticleWriteRequest,
    actor: Actor = Depends(get_current_actor),
    articles: ArticleService = Depends(get_article_service)
) -> ArticleResponse:
    article = await articles.create_article(actor, request.to_draft())
    return ArticleResponse.from_domain(article)


@articles_router.get("/{article_id}", response_model=ArticleResponse, summary="Get article")
async def get_article(
    article_id: str = Path(..., min_length=1),
    articles: ArticleService = Depends(get_article_service)
) -> ArticleResponse:
    article = await articles.get_article(article_id)
    if article is None:
        raise NotFoundError("Статья не найдена", resource_type="article", resource_id=article_id)
    return ArticleResponse.from_domain(article)


@articles_router.put("/{article_id}", response_model=ArticleResponse, summary="Edit your article")
async def update_article(
    request: ArticleWriteRequest,
    article_id: str = Path(..., min_length=1),
    actor: Actor = Depends(get_current_actor),
    articles: ArticleService = Depends(get_article_service)
) -> ArticleResponse:
    article = await articles.update_article(actor, article_id, request.to_draft())
    return ArticleResponse.from_domain(article)


@articles_router.post(
    "/{article_id}/cover",
    response_model=ArticleResponse,
    summary="Upload an article cover"
)
async def upload_cover(
    article_id: str = Path(..., min_length=1),
    file: UploadFile = File(..., description="Cover image"),
    actor: Actor = Depends(get_current_actor),
    articles: ArticleService = Depends(get_article_service)
) -> ArticleResponse:
    data = await file.read()
    content_type = file.content_type or "application/octet-stream"
    article = await articles.upload_cover(actor, article_id, file.filename or "image", data, content_type)
    return ArticleResponse.from_domain(article)
