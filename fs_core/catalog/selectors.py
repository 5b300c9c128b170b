# fs_core/catalog/selectors.py
from __future__ import annotations

from uuid import UUID

from django.db.models import QuerySet

from fs_core.catalog.models import Article
from fs_core.common.api.exceptions import NotFoundError


def articles_qs() -> QuerySet[Article]:
    return Article.objects.all()


def active_articles() -> QuerySet[Article]:
    return Article.objects.filter(is_active=True).order_by("category", "sort_order", "name")


def get_article(*, article_id: UUID) -> Article:
    """
    Direct lookup; inactive articles are returned too so lines that already
    reference them stay editable.
    """
    article = Article.objects.filter(id=article_id).first()
    if article is None:
        raise NotFoundError(f"Article {article_id} not found.")
    return article
