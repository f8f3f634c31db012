"""Tests for SearchService and the hit ordering rules."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from blog.auth.models import User
from blog.categories.models import Category
from blog.comments.models import Comment
from blog.core.exceptions import ValidationFailedError
from blog.posts.models import Post
from blog.profiles.models import UserProfile
from blog.search.service import SearchService, relevance, sort_posts
from tests.factories import category_row, comment_row, post_row, ts, user_row


def make_post(title: str, **overrides) -> Post:
    return Post.from_row(post_row(title, **overrides))


@pytest.fixture
def services():
    post_service = AsyncMock()
    post_service.list_published = AsyncMock(return_value=[])
    post_service.get_post = AsyncMock(return_value=None)
    auth_service = AsyncMock()
    auth_service.search_users = AsyncMock(return_value=[])
    auth_service.get_user_by_username = AsyncMock(return_value=None)
    profile_service = AsyncMock()
    profile_service.get_profile = AsyncMock(return_value=None)
    comment_service = AsyncMock()
    comment_service.search_comments = AsyncMock(return_value=[])
    category_service = AsyncMock()
    category_service.find_by_slug = AsyncMock(return_value=None)
    category_service.list_categories = AsyncMock(return_value=[])
    return {
        "post_service": post_service,
        "auth_service": auth_service,
        "profile_service": profile_service,
        "comment_service": comment_service,
        "category_service": category_service,
    }


@pytest.fixture
def search_service(services) -> SearchService:
    return SearchService(**services)


class TestOrdering:
    def test_relevance_scores(self):
        assert relevance(make_post("Python tips"), "python") == 3
        assert relevance(make_post("Tips", excerpt="python"), "python") == 2
        assert relevance(make_post("Tips", content="python"), "python") == 1
        assert relevance(make_post("Tips"), "python") == 0

    def test_sort_modes(self):
        old_popular = make_post("A", created_at=ts(1), likes={uuid4(), uuid4()}, views=1)
        new_viewed = make_post("B", created_at=ts(3), views=100)
        posts = [old_popular, new_viewed]

        assert sort_posts(posts, "newest", "x") == [new_viewed, old_popular]
        assert sort_posts(posts, "oldest", "x") == [old_popular, new_viewed]
        assert sort_posts(posts, "popular", "x") == [old_popular, new_viewed]
        assert sort_posts(posts, "trending", "x") == [new_viewed, old_popular]

    def test_relevance_ties_newest_first(self):
        older = make_post("python one", created_at=ts(1))
        newer = make_post("python two", created_at=ts(2))
        body_hit = make_post("other", content="python", created_at=ts(5))

        assert sort_posts([older, body_hit, newer], "relevance", "python") == [
            newer,
            older,
            body_hit,
        ]


class TestSearch:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", [None, "", "   "])
    async def test_query_required(self, search_service, query):
        with pytest.raises(ValidationFailedError):
            await search_service.search(query)

    @pytest.mark.asyncio
    async def test_all_kinds_total(self, search_service, services):
        post = make_post("Cassandra modelling")
        services["post_service"].list_published.return_value = [
            post,
            make_post("Unrelated"),
        ]
        services["post_service"].get_post.return_value = post
        public = User.from_row(user_row("cassie"))
        private = User.from_row(user_row("cassandra_fan"))
        services["auth_service"].search_users.return_value = [public, private]
        services["profile_service"].get_profile.side_effect = lambda user_id: (
            UserProfile(user_id=user_id, is_public=user_id == public.id)
        )
        comment = Comment.from_row(comment_row(post.post_id, "cassandra rocks"))
        services["comment_service"].search_comments.return_value = [comment]

        results = await search_service.search("cassandra")

        assert results.posts == [post]
        assert [u.username for u, _ in results.users] == ["cassie"]
        assert results.comments == [(comment, post)]
        assert results.total == 4

    @pytest.mark.asyncio
    async def test_single_kind(self, search_service, services):
        services["post_service"].list_published.return_value = [make_post("Python")]

        results = await search_service.search("python", kind="posts")

        assert results.total == 1
        services["auth_service"].search_users.assert_not_awaited()
        services["comment_service"].search_comments.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_category_and_author_filters(self, search_service, services):
        category = Category.from_row(category_row("Tech"))
        author = User.from_row(user_row("writer"))
        match = make_post(
            "Python in tech", category_id=category.category_id, author_id=author.id
        )
        services["post_service"].list_published.return_value = [
            match,
            make_post("Python elsewhere", author_id=author.id),
            make_post("Python by other", category_id=category.category_id),
        ]
        services["category_service"].find_by_slug.return_value = category
        services["auth_service"].get_user_by_username.return_value = author

        results = await search_service.search(
            "python", kind="posts", category="tech", author="writer"
        )

        assert results.posts == [match]

    @pytest.mark.asyncio
    async def test_unknown_filters_ignored(self, search_service, services):
        services["post_service"].list_published.return_value = [make_post("Python")]

        results = await search_service.search(
            "python", kind="posts", category="ghost", author="nobody"
        )

        assert results.total == 1

    @pytest.mark.asyncio
    async def test_date_range(self, search_service, services):
        services["post_service"].list_published.return_value = [
            make_post("Python early", created_at=ts(1)),
            make_post("Python mid", created_at=ts(5)),
            make_post("Python late", created_at=ts(9)),
        ]

        results = await search_service.search(
            "python", kind="posts", date_from=ts(3), date_to=ts(6)
        )

        assert [p.title for p in results.posts] == ["Python mid"]

    @pytest.mark.asyncio
    async def test_pagination_per_kind(self, search_service, services):
        services["post_service"].list_published.return_value = [
            make_post(f"Python {day}", created_at=ts(day)) for day in range(1, 6)
        ]

        results = await search_service.search(
            "python", kind="posts", sort_by="newest", page=2, limit=2
        )

        assert [p.title for p in results.posts] == ["Python 3", "Python 2"]
        assert results.total == 5


class TestSuggestions:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", [None, "", "p", " p "])
    async def test_short_query_empty(self, search_service, services, query):
        assert await search_service.suggestions(query) == []
        services["post_service"].list_published.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_mixed(self, search_service, services):
        services["post_service"].list_published.return_value = [
            make_post("Python basics")
        ]
        services["auth_service"].search_users.return_value = [
            User.from_row(user_row("pythonista"))
        ]
        services["category_service"].list_categories.return_value = [
            Category.from_row(category_row("Python")),
            Category.from_row(category_row("Art")),
        ]

        found = await search_service.suggestions("pyth")

        assert [(s.type, s.url) for s in found] == [
            ("post", "/post/python-basics"),
            ("user", "/profile/pythonista"),
            ("category", "/category/python"),
        ]
        services["auth_service"].search_users.assert_awaited_once_with("pyth", 5)

    @pytest.mark.asyncio
    async def test_capped(self, search_service, services):
        services["post_service"].list_published.return_value = [
            make_post(f"Python {i}") for i in range(8)
        ]
        services["category_service"].list_categories.return_value = [
            Category.from_row(category_row(f"Python {i}")) for i in range(8)
        ]

        found = await search_service.suggestions("python")

        assert len(found) == 10
        assert [s.type for s in found].count("post") == 5


class TestPostCommentSearch:
    @pytest.mark.asyncio
    async def test_delegates(self, search_service, services):
        post_id = uuid4()
        services["comment_service"].search_in_post = AsyncMock(return_value=([], 0))

        assert await search_service.search_post_comments(post_id, " hi ") == ([], 0)
        services["comment_service"].search_in_post.assert_awaited_once_with(
            post_id, "hi", 1, 20
        )

    @pytest.mark.asyncio
    async def test_query_required(self, search_service):
        with pytest.raises(ValidationFailedError):
            await search_service.search_post_comments(uuid4(), "")
