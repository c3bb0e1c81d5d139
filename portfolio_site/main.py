from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from portfolio_site.api.routes import analytics, contact, site
from portfolio_site.core.config import settings
from portfolio_site.core.errors import register_exception_handlers
from portfolio_site.core.logging import setup_logging
from portfolio_site.core.middleware import RequestIdMiddleware
from portfolio_site.core.security_headers import SecurityHeadersMiddleware

# Setup logging
logger = setup_logging()


tags_metadata = [
    {
        "name": "contact",
        "description": "**Contact** - Public contact form relayed by email (rate limited).",
    },
    {
        "name": "analytics",
        "description": "**Analytics** - Fire-and-forget front-end events, logged only.",
    },
    {
        "name": "site",
        "description": "**Site** - Portfolio page, static assets and health check.",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events"""
    logger.info(
        "server_started",
        url=f"http://localhost:{settings.PORT}",
        email_account=settings.EMAIL_USER or "not configured",
        environment=settings.ENVIRONMENT,
    )

    yield

    logger.info("server_stopped")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Personal portfolio website with a contact form email relay.",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url=None,
)

# Security headers (CSP etc.)
app.add_middleware(SecurityHeadersMiddleware)

# Request ID Tracing
app.add_middleware(RequestIdMiddleware)

# CORS middleware (outermost, so error responses carry CORS headers too)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=settings.ALLOWED_METHODS,
    allow_headers=settings.ALLOWED_HEADERS,
    expose_headers=["X-Request-ID"],
)

# Register global exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(contact.router, prefix="/api", tags=["contact"])
app.include_router(analytics.router, prefix="/api", tags=["analytics"])
app.include_router(site.router, tags=["site"])

# Static bundle last: it answers every path no route claimed
app.mount("/", StaticFiles(directory=str(settings.STATIC_DIR)), name="static")


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "portfolio_site.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_config=None,
    )


if __name__ == "__main__":
    run()
