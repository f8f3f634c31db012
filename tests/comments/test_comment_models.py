"""Tests for the Comment entity state transitions."""

from uuid import uuid4

import pytest

from blog.comments.models import (
    DELETED_PLACEHOLDER,
    ActiveBody,
    Comment,
    DeletedBody,
    create_comment,
)
from tests.factories import comment_row, ts


@pytest.fixture
def comment() -> Comment:
    return create_comment(
        post_id=uuid4(), author_id=uuid4(), author_name="bob", content="First!"
    )


class TestCreateComment:
    def test_defaults(self, comment: Comment):
        assert comment.is_top_level
        assert comment.is_visible
        assert comment.likes_count == 0
        assert comment.replies == []
        assert comment.replies_count == 0
        assert comment.report_count == 0
        assert comment.is_edited is False
        assert comment.created_at == comment.updated_at


class TestEdit:
    def test_edit_marks_edited(self, comment: Comment):
        comment.edit("Second thoughts", now=ts(5))

        assert comment.content == "Second thoughts"
        assert comment.is_edited
        assert comment.edited_at == ts(5)
        assert comment.updated_at == ts(5)

    def test_edit_after_delete_rejected(self, comment: Comment):
        comment.soft_delete()

        with pytest.raises(ValueError, match="deleted"):
            comment.edit("too late")


class TestSoftDelete:
    def test_replaces_content_with_placeholder(self, comment: Comment):
        assert comment.soft_delete(now=ts(3)) is True

        assert comment.is_deleted
        assert comment.content == DELETED_PLACEHOLDER
        assert comment.deleted_at == ts(3)
        assert not comment.is_visible

    def test_second_delete_is_noop(self, comment: Comment):
        comment.soft_delete(now=ts(3))

        assert comment.soft_delete(now=ts(4)) is False
        assert comment.deleted_at == ts(3)


class TestToggleLike:
    def test_like_then_unlike(self, comment: Comment):
        liker = uuid4()

        assert comment.toggle_like(liker) is True
        assert comment.likes_count == 1
        assert comment.is_liked_by(liker)

        assert comment.toggle_like(liker) is False
        assert comment.likes_count == 0
        assert not comment.is_liked_by(liker)

    def test_count_tracks_distinct_accounts(self, comment: Comment):
        for _ in range(3):
            comment.toggle_like(uuid4())

        assert comment.likes_count == len(comment.likes) == 3


class TestReport:
    def test_four_reports_stay_visible(self, comment: Comment):
        for _ in range(4):
            comment.report(uuid4())

        assert comment.report_count == 4
        assert comment.is_approved

    def test_fifth_report_hides(self, comment: Comment):
        for _ in range(5):
            comment.report(uuid4())

        assert comment.report_count == 5
        assert not comment.is_approved
        assert not comment.is_visible

    def test_hidden_stays_hidden(self, comment: Comment):
        for _ in range(7):
            comment.report(uuid4(), threshold=5)

        assert comment.report_count == 7
        assert not comment.is_approved

    def test_repeat_reports_counted_by_default(self, comment: Comment):
        reporter = uuid4()
        comment.report(reporter)
        comment.report(reporter)

        assert comment.report_count == 2
        assert comment.reported_by == {reporter}

    def test_dedup_ignores_repeat_reporter(self, comment: Comment):
        reporter = uuid4()

        assert comment.report(reporter, dedup=True) is True
        assert comment.report(reporter, dedup=True) is False
        assert comment.report_count == 1


class TestFromRow:
    def test_active_row(self):
        liker = uuid4()
        row = comment_row(
            uuid4(), "Hello", likes={liker: ts(3)}, likes_count=1, is_edited=True
        )

        comment = Comment.from_row(row)

        assert isinstance(comment.body, ActiveBody)
        assert comment.content == "Hello"
        assert comment.is_edited
        assert comment.is_liked_by(liker)
        assert comment.created_at.tzinfo is not None

    def test_deleted_row(self):
        row = comment_row(uuid4(), DELETED_PLACEHOLDER, is_deleted=True, deleted_at=ts(4))

        comment = Comment.from_row(row)

        assert isinstance(comment.body, DeletedBody)
        assert comment.deleted_at == ts(4)
        assert comment.is_edited is False

    def test_null_approval_means_approved(self):
        comment = Comment.from_row(comment_row(uuid4(), is_approved=None))

        assert comment.is_approved
