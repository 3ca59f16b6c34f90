import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from blog_api.config import settings
from blog_api.database import engine
from blog_api.errors import (
    BlogAPIError,
    blog_api_error_handler,
    request_validation_error_handler,
    unhandled_error_handler,
)
from blog_api.middleware import TimingMiddleware
from blog_api.routers import blog, taxonomy

API_VERSION = "1.0.0"

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Blog API starting (env=%s)", settings.APP_ENV)
    yield
    await engine.dispose()

app = FastAPI(
    title="Blog Content API",
    description="Create, list, fetch, update and delete blog posts with author-gated mutation",
    version=API_VERSION,
    lifespan=lifespan,
)

# Middleware
app.add_middleware(TimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Error handlers
app.add_exception_handler(BlogAPIError, blog_api_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)
app.add_exception_handler(Exception, unhandled_error_handler)

# Routers
app.include_router(blog.router)
app.include_router(taxonomy.router)

@app.get("/health")
async def health():
    return {"status": "healthy", "version": API_VERSION}
