# fs_core/catalog/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.response import Response

from fs_core.catalog.api.serializers import ArticleCreateSerializer, ArticleSerializer, ArticleUpdateSerializer
from fs_core.catalog.models import Article
from fs_core.catalog.selectors import articles_qs, get_article
from fs_core.catalog.services import ArticleService
from fs_core.common.api.pagination import paginate
from fs_core.common.api.params import require_uuid
from fs_core.common.permissions import AdminWriteOrAuthenticatedRead


class ArticleViewSet(viewsets.GenericViewSet):
    """
    Catalog articles. Filter with ?category=&is_active=, search with ?search=.
    """
    serializer_class = ArticleSerializer
    permission_classes = [AdminWriteOrAuthenticatedRead]
    queryset = Article.objects.none()
    filterset_fields = ["category", "is_active", "unit"]
    search_fields = ["code", "name", "category"]
    ordering_fields = ["code", "name", "category", "sort_order", "default_price"]

    def get_queryset(self):
        return articles_qs().order_by("category", "sort_order", "name")

    @extend_schema(tags=["Catalog"], responses={200: ArticleSerializer(many=True)})
    def list(self, request):
        qs = self.filter_queryset(self.get_queryset())
        return paginate(request, qs, ArticleSerializer)

    @extend_schema(tags=["Catalog"], responses={200: ArticleSerializer})
    def retrieve(self, request, pk=None):
        article = get_article(article_id=require_uuid(pk, "id"))
        return Response(ArticleSerializer(article).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Catalog"], request=ArticleCreateSerializer, responses={201: ArticleSerializer})
    def create(self, request):
        ser = ArticleCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        article = ArticleService.create(**ser.validated_data)
        return Response(ArticleSerializer(article).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Catalog"], request=ArticleUpdateSerializer, responses={200: ArticleSerializer})
    def partial_update(self, request, pk=None):
        ser = ArticleUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        article = ArticleService.update(article_id=require_uuid(pk, "id"), **ser.validated_data)
        return Response(ArticleSerializer(article).data, status=status.HTTP_200_OK)

    @extend_schema(tags=["Catalog"], responses={204: None})
    def destroy(self, request, pk=None):
        ArticleService.delete(article_id=require_uuid(pk, "id"))
        return Response(status=status.HTTP_204_NO_CONTENT)
