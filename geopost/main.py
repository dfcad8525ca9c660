import logging
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from .config import settings
from .deps import get_db
from .routers import auth, health, posts, search
from .utils.mongo_indexes import ensure_indexes

logger = logging.getLogger("geopost")

def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger("geopost")
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(name)s] %(levelname)s: %(message)s"))
        root.addHandler(handler)
    root.setLevel(level.upper())

configure_logging(settings.LOG_LEVEL)

app = FastAPI(title=settings.API_TITLE, version=settings.API_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# déclaré après CORSMiddleware -> le plus externe : tout OPTIONS (preflight
# compris) répond vide tout de suite, les autres réponses portent Allow-Origin
@app.middleware("http")
async def cors_headers(request: Request, call_next):
    if request.method == "OPTIONS":
        return Response(status_code=200, headers={
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type,Authorization",
        })
    response = await call_next(request)
    response.headers.setdefault("Access-Control-Allow-Origin", "*")
    return response

# Routes
app.include_router(auth.router,   prefix=settings.API_PREFIX, tags=["auth"])
app.include_router(posts.router,  prefix=settings.API_PREFIX, tags=["posts"])
app.include_router(search.router, prefix=settings.API_PREFIX, tags=["search"])
app.include_router(health.router, prefix=settings.API_PREFIX, tags=["health"])

@app.on_event("startup")
async def on_startup():
    logger.info("startup env=%s version=%s ledger=%s",
                settings.APP_ENV, settings.API_VERSION, settings.LEDGER_ENABLED)
    db = get_db()
    # BootstrapFailure remonte : pas de trafic sur un index mal configuré
    await ensure_indexes(db, posts=settings.POSTS_COLLECTION, users=settings.USERS_COLLECTION)
    logger.info("indexes ensured on %s", settings.DB_NAME)
