"""HTTP tests for the post endpoints."""

from uuid import uuid4

import pytest

from blog.categories.service import CategoryService
from blog.posts.service import PostService
from tests.factories import post_row, ts


@pytest.fixture
def post_service(app, mock_session):
    service = PostService(
        session=mock_session,
        keyspace="test_keyspace",
        category_service=CategoryService(session=mock_session, keyspace="test_keyspace"),
    )
    app.state.post_service = service
    return service


class TestPostEndpoints:
    def test_list(self, client, post_service, route_rows):
        route_rows(
            {
                post_service._get_all_posts: [
                    post_row("Older", created_at=ts(1)),
                    post_row("Newer", created_at=ts(2)),
                ]
            }
        )

        response = client.get("/v1/posts?limit=1")

        assert response.status_code == 200
        body = response.json()
        assert [p["title"] for p in body["posts"]] == ["Newer"]
        assert body["total"] == 2
        assert body["total_pages"] == 2
        assert body["current_page"] == 1

    def test_limit_bounds(self, client, post_service):
        assert client.get("/v1/posts?limit=0").status_code == 400
        assert client.get("/v1/posts?limit=101").status_code == 400

    def test_get_by_slug(self, client, post_service, route_rows):
        route_rows({post_service._get_post_by_slug: [post_row("Read Me", views=3)]})

        response = client.get("/v1/posts/read-me")

        assert response.status_code == 200
        assert response.json()["views"] == 4
        assert response.json()["category"] is None

    def test_missing_slug(self, client, post_service):
        assert client.get("/v1/posts/missing").status_code == 404

    def test_create_requires_auth(self, client, post_service):
        response = client.post("/v1/posts", json={"title": "T", "content": "C"})

        assert response.status_code == 401

    def test_create(self, client, post_service, auth_headers):
        response = client.post(
            "/v1/posts",
            json={"title": "Hello, World!", "content": "Body", "published": True},
            headers=auth_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["slug"] == "hello-world"
        assert body["author"]["username"] == "alice"
        assert body["likes_count"] == 0

    def test_create_duplicate_slug(self, client, post_service, route_rows, auth_headers):
        route_rows({post_service._get_post_by_slug: [post_row("hello world")]})

        response = client.post(
            "/v1/posts",
            json={"title": "Hello World", "content": "Body"},
            headers=auth_headers,
        )

        assert response.status_code == 400

    def test_create_title_without_slug(self, client, post_service, auth_headers):
        response = client.post(
            "/v1/posts",
            json={"title": "!!!", "content": "Body"},
            headers=auth_headers,
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Title must contain letters or digits"

    def test_update_forbidden(self, client, post_service, route_rows, auth_headers):
        row = post_row("Someone Else's")
        route_rows({post_service._get_post: [row]})

        response = client.put(
            f"/v1/posts/{row.post_id}", json={"content": "x"}, headers=auth_headers
        )

        assert response.status_code == 403

    def test_delete_as_admin(self, client, post_service, route_rows, admin_headers):
        row = post_row("Doomed")
        route_rows({post_service._get_post: [row]})

        response = client.delete(f"/v1/posts/{row.post_id}", headers=admin_headers)

        assert response.status_code == 200

    def test_like(self, client, post_service, route_rows, auth_headers):
        row = post_row("Likeable")
        route_rows({post_service._get_post: [row]})

        response = client.post(f"/v1/posts/{row.post_id}/like", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"likes": 1, "liked": True}

    def test_like_missing(self, client, post_service, auth_headers):
        response = client.post(f"/v1/posts/{uuid4()}/like", headers=auth_headers)

        assert response.status_code == 404
