"""
Knowledge Controller
====================

Knowledge base articles, addressed by id, KB id (KB-2026-00001) or slug.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from servicedesk.api.responses import paginated, success
from servicedesk.api.v1.dependencies import get_current_user, get_knowledge_service, get_organization_id
from servicedesk.application.dto.knowledge_dto import (
    ArticleCreateRequest,
    ArticleFeedbackRequest,
    ArticleUpdateRequest,
    LinkIncidentRequest,
    LinkKnownErrorRequest,
)
from servicedesk.application.services.knowledge_service import KnowledgeService
from servicedesk.domain.models.user import User

router = APIRouter(tags=["knowledge"])


@router.get("/stats", summary="Knowledge base counts, views and ratings")
def knowledge_stats(
    organization_id: str = Depends(get_organization_id),
    service: KnowledgeService = Depends(get_knowledge_service),
):
    return success(service.stats(organization_id))


@router.get("/search", summary="Search published articles")
def search_articles(
    q: str = Query(..., min_length=1),
    category_id: Optional[str] = None,
    limit: int = Query(10, ge=1, le=50),
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: KnowledgeService = Depends(get_knowledge_service),
):
    return success(service.search(organization_id, user, q, category_id=category_id, limit=limit))


@router.get("/featured", summary="Featured articles")
def featured_articles(
    limit: int = Query(5, ge=1, le=50),
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: KnowledgeService = Depends(get_knowledge_service),
):
    return success(service.featured(organization_id, user, limit))


@router.get("/popular", summary="Most viewed articles")
def popular_articles(
    limit: int = Query(10, ge=1, le=50),
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: KnowledgeService = Depends(get_knowledge_service),
):
    return success(service.popular(organization_id, user, limit))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Draft an article")
def create_article(
    body: ArticleCreateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: KnowledgeService = Depends(get_knowledge_service),
):
    return success(service.create(organization_id, user, body.model_dump()), "Article created")


@router.get("", summary="List articles")
def list_articles(
    status_filter: Optional[str] = Query(None, alias="status"),
    category_id: Optional[str] = None,
    visibility: Optional[str] = None,
    tag: Optional[str] = None,
    is_featured: Optional[bool] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: KnowledgeService = Depends(get_knowledge_service),
):
    articles, total = service.list_articles(
        organization_id,
        user,
        status=status_filter,
        category_id=category_id,
        visibility=visibility,
        tag=tag,
        is_featured=is_featured,
        search=search,
        page=page,
        limit=limit,
    )
    return paginated(articles, page, limit, total)


@router.get("/{article_id}", summary="Read an article")
def get_article(
    article_id: str,
    increment_views: bool = False,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: KnowledgeService = Depends(get_knowledge_service),
):
    return success(service.get(organization_id, user, article_id, count_view=increment_views))


@router.put("/{article_id}", summary="Edit an article")
def update_article(
    article_id: str,
    body: ArticleUpdateRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: KnowledgeService = Depends(get_knowledge_service),
):
    article = service.update(organization_id, user, article_id, body.model_dump(exclude_unset=True))
    return success(article, "Article updated")


@router.delete("/{article_id}", summary="Delete an article")
def delete_article(
    article_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: KnowledgeService = Depends(get_knowledge_service),
):
    service.delete(organization_id, user, article_id)
    return success(message="Article deleted")


@router.post("/{article_id}/publish", summary="Publish an article")
def publish_article(
    article_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: KnowledgeService = Depends(get_knowledge_service),
):
    return success(service.publish(organization_id, user, article_id), "Article published")


@router.post("/{article_id}/archive", summary="Archive an article")
def archive_article(
    article_id: str,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: KnowledgeService = Depends(get_knowledge_service),
):
    return success(service.archive(organization_id, user, article_id), "Article archived")


@router.post("/{article_id}/feedback", summary="Rate an article")
def submit_feedback(
    article_id: str,
    body: ArticleFeedbackRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: KnowledgeService = Depends(get_knowledge_service),
):
    metrics = service.submit_feedback(organization_id, user, article_id, helpful=body.helpful, rating=body.rating)
    return success(metrics, "Feedback submitted")


@router.post("/{article_id}/link-incident", summary="Link an incident")
def link_incident(
    article_id: str,
    body: LinkIncidentRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: KnowledgeService = Depends(get_knowledge_service),
):
    return success(service.link_incident(organization_id, user, article_id, body.incident_id), "Incident linked")


@router.post("/{article_id}/link-known-error", summary="Link a known error")
def link_known_error(
    article_id: str,
    body: LinkKnownErrorRequest,
    organization_id: str = Depends(get_organization_id),
    user: User = Depends(get_current_user),
    service: KnowledgeService = Depends(get_knowledge_service),
):
    return success(service.link_known_error(organization_id, user, article_id, body.ke_id), "Known error linked")
