"""Informative Blog API application factory and lifespan."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse

from blog.auth.router import router as auth_router
from blog.auth.service import AuthService
from blog.categories.router import router as categories_router
from blog.categories.service import CategoryService
from blog.comments.router import router as comments_router
from blog.comments.service import CommentService
from blog.config import Settings, get_settings
from blog.core.database import init_async_cassandra, shutdown_async_cassandra
from blog.core.handlers import install_exception_handlers
from blog.core.logging import configure_structlog, get_logger
from blog.core.middleware import RequestContextMiddleware
from blog.core.redis import init_redis, shutdown_redis
from blog.health.router import router as health_router
from blog.newsletter.router import router as newsletter_router
from blog.newsletter.service import NewsletterService
from blog.posts.router import router as posts_router
from blog.posts.service import PostService
from blog.profiles.router import router as profiles_router
from blog.profiles.service import ProfileService
from blog.search.router import router as search_router
from blog.search.service import SearchService
from blog.sitemap.router import router as sitemap_router
from blog.sitemap.service import SitemapService


settings = get_settings()
configure_structlog(settings)

logger = get_logger(__name__)

ROUTERS = (
    health_router,
    auth_router,
    categories_router,
    posts_router,
    comments_router,
    profiles_router,
    search_router,
    newsletter_router,
    sitemap_router,
)


def init_services(app: FastAPI, session, settings: Settings, redis_client=None) -> None:
    """Build every service over one session and publish them on ``app.state``."""
    keyspace = settings.cassandra_keyspace
    state = app.state

    state.cassandra_session = session
    state.auth_service = AuthService(session=session, keyspace=keyspace)
    state.category_service = CategoryService(session=session, keyspace=keyspace)
    state.post_service = PostService(
        session=session, keyspace=keyspace, category_service=state.category_service
    )
    state.profile_service = ProfileService(
        session=session,
        keyspace=keyspace,
        auth_service=state.auth_service,
        post_service=state.post_service,
    )
    state.comment_service = CommentService(
        session=session,
        keyspace=keyspace,
        post_service=state.post_service,
        profile_service=state.profile_service,
        redis=redis_client,
        report_threshold=settings.comment_report_threshold,
        report_dedup=settings.comment_report_dedup,
        max_length=settings.comment_max_length,
    )
    state.search_service = SearchService(
        post_service=state.post_service,
        auth_service=state.auth_service,
        profile_service=state.profile_service,
        comment_service=state.comment_service,
        category_service=state.category_service,
    )
    state.newsletter_service = NewsletterService(session=session, keyspace=keyspace)
    state.sitemap_service = SitemapService(
        post_service=state.post_service,
        category_service=state.category_service,
        base_url=settings.site_base_url,
    )
    logger.info("services_initialized", rate_limiting=redis_client is not None)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Connect backing stores; the API still starts (degraded) when they are down."""
    settings = get_settings()
    logger.info(
        "blog_starting",
        version=settings.app_version,
        environment=settings.environment,
    )

    redis_client = None
    try:
        redis_client = await init_redis()
    except Exception as e:
        logger.warning("redis_unavailable", error=str(e), rate_limiting=False)

    try:
        session = await init_async_cassandra()
    except Exception as e:
        logger.error("cassandra_unavailable", error=str(e))
    else:
        init_services(app, session, settings, redis_client)

    yield

    logger.info("blog_stopping")
    await shutdown_redis()
    await shutdown_async_cassandra()


def create_app() -> FastAPI:
    settings = get_settings()
    expose_docs = settings.is_development

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Informative Blog - API",
        lifespan=lifespan,
        default_response_class=ORJSONResponse,
        docs_url="/docs" if expose_docs else None,
        redoc_url="/redoc" if expose_docs else None,
        openapi_url="/openapi.json" if expose_docs else None,
    )

    # Starlette runs the last added middleware first
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        max_age=settings.cors_max_age,
    )
    app.add_middleware(
        RequestContextMiddleware,
        log_requests=settings.log_requests,
        exclude_paths=settings.log_exclude_paths,
    )
    install_exception_handlers(app)

    for router in ROUTERS:
        app.include_router(router)

    @app.get("/", include_in_schema=False)
    async def root(request: Request) -> dict[str, str | None]:
        return {
            "message": "Informative Blog API",
            "version": settings.app_version,
            "docs": f"{request.base_url}docs" if expose_docs else None,
        }

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve ``blog.main:app`` with uvicorn."""
    import uvicorn

    uvicorn.run(
        "blog.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        workers=1 if settings.api_reload else settings.api_workers,
    )
