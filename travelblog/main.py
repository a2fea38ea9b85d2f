import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from fastapi.staticfiles import StaticFiles

from travelblog import __version__
from travelblog.core.config import settings
from travelblog.db.session import create_db_and_tables
from travelblog.routers import (
    admin,
    admin_blog,
    admin_directory,
    admin_integration,
    admin_media,
    auth,
    blog,
    comments,
    dashboard,
    directory,
    search,
    site,
)

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    logger.info("%s %s started", settings.PROJECT_NAME, __version__)
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=__version__,
    lifespan=lifespan,
    description="Travel blog, business directory and admin dashboard for Australia Travel Blog",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(dashboard.LoginRequired)
async def login_required_handler(request: Request, exc: dashboard.LoginRequired):
    return RedirectResponse("/admin/login", status_code=303)


app.include_router(auth.router, prefix="/api/v1/auth", tags=["auth"])
app.include_router(admin.router, prefix="/api/v1/admin", tags=["admin"])
app.include_router(admin_integration.router, prefix="/api/v1/admin/blog/directory-integration", tags=["admin"])
app.include_router(admin_blog.router, prefix="/api/v1/admin/blog", tags=["admin"])
app.include_router(admin_directory.router, prefix="/api/v1/admin/directory", tags=["admin"])
app.include_router(admin_media.router, prefix="/api/v1/admin/media", tags=["admin"])
app.include_router(blog.router, prefix="/api/v1/blog", tags=["blog"])
app.include_router(comments.router, prefix="/api/v1/comments", tags=["comments"])
app.include_router(directory.router, prefix="/api/v1", tags=["directory"])
app.include_router(search.router, prefix="/api/v1/search", tags=["search"])

Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
app.mount(settings.MEDIA_URL_PREFIX, StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

# HTML routes last so the API prefixes win
app.include_router(dashboard.router, prefix="/admin", include_in_schema=False)
app.include_router(site.router, include_in_schema=False)
