"""HTTP tests for the search endpoints."""

from unittest.mock import AsyncMock

import pytest

from blog.posts.models import Post
from blog.search.service import SearchService
from tests.factories import post_row


@pytest.fixture
def search_service(app):
    post_service = AsyncMock()
    post_service.list_published = AsyncMock(
        return_value=[Post.from_row(post_row("Python tricks"))]
    )
    post_service.to_responses = AsyncMock(return_value=[])
    auth_service = AsyncMock()
    auth_service.search_users = AsyncMock(return_value=[])
    comment_service = AsyncMock()
    comment_service.search_comments = AsyncMock(return_value=[])
    comment_service.search_in_post = AsyncMock(return_value=([], 0))
    category_service = AsyncMock()
    category_service.list_categories = AsyncMock(return_value=[])
    service = SearchService(
        post_service=post_service,
        auth_service=auth_service,
        profile_service=AsyncMock(),
        comment_service=comment_service,
        category_service=category_service,
    )
    app.state.search_service = service
    return service


class TestSearchEndpoints:
    def test_query_required(self, client, search_service):
        assert client.get("/v1/search").status_code == 400
        assert client.get("/v1/search?q=%20").status_code == 400

    def test_search(self, client, search_service):
        response = client.get("/v1/search?q=python&type=posts&sortBy=newest")

        assert response.status_code == 200
        body = response.json()
        assert body["query"] == "python"
        assert body["type"] == "posts"
        assert body["results"]["total"] == 1
        assert body["pagination"]["total"] == 1

    def test_unknown_type(self, client, search_service):
        assert client.get("/v1/search?q=python&type=videos").status_code == 400

    def test_suggestions_short_query(self, client, search_service):
        response = client.get("/v1/search/suggestions?q=p")

        assert response.status_code == 200
        assert response.json() == {"suggestions": []}

    def test_suggestions(self, client, search_service):
        response = client.get("/v1/search/suggestions?q=pyt&type=posts")

        assert response.json()["suggestions"] == [
            {"type": "post", "title": "Python tricks", "url": "/post/python-tricks"}
        ]

    def test_post_comments(self, client, search_service):
        post_id = "00000000-0000-0000-0000-000000000001"

        response = client.get(f"/v1/search/post/{post_id}?q=hi")

        assert response.status_code == 200
        assert response.json()["comments"] == []
