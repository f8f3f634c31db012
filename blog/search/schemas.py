"""Pydantic schemas for search."""

from pydantic import BaseModel

from blog.comments.schemas import CommentResponse, UserCommentResponse
from blog.core.schemas import PaginationInfo
from blog.posts.schemas import PostResponse
from blog.profiles.schemas import ProfileResponse


class SearchResultsResponse(BaseModel):
    posts: list[PostResponse] = []
    users: list[ProfileResponse] = []
    comments: list[UserCommentResponse] = []
    total: int = 0


class SearchResponse(BaseModel):
    query: str
    type: str
    results: SearchResultsResponse
    pagination: PaginationInfo


class SuggestionResponse(BaseModel):
    type: str
    title: str
    url: str


class SuggestionListResponse(BaseModel):
    suggestions: list[SuggestionResponse]


class PostCommentSearchResponse(BaseModel):
    comments: list[CommentResponse]
    pagination: PaginationInfo
