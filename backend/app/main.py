import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from backend.app.core.database import create_tables
from backend.app.core.errors import EsportsError
from backend.app.api.team import router as team_router
from backend.app.api.tournament import router as tournament_router
from backend.app.api.match import router as match_router
from backend.app.api.admin import router as admin_router

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

FRONTEND_DIR = Path(os.getenv("FRONTEND_DIR", Path(__file__).resolve().parents[2] / "frontend"))

# --- LIFESPAN MANAGER (Schema on Startup) ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: create any missing tables
    logger.info("🔄 Checking database schema...")
    await create_tables()
    yield
# -------------------------------------------------

app = FastAPI(title="Esports Tournament API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "http://localhost:5500,http://127.0.0.1:5500").split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- ERROR KINDS -> STATUS CODES ---
def jsonable_errors(exc: RequestValidationError):
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()]

@app.exception_handler(EsportsError)
async def esports_error_handler(request: Request, exc: EsportsError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Missing or malformed bodies are plain bad requests here, not 422s
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request data.", "errors": jsonable_errors(exc)},
    )

@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An error occurred while processing your request."},
    )

@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unexpected error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An error occurred while processing your request."},
    )
# --------------------------------

# Register routers
app.include_router(team_router, prefix="/api/team", tags=["Team"])
app.include_router(tournament_router, prefix="/api/tournament", tags=["Tournament"])
app.include_router(match_router, prefix="/api/match", tags=["Match"])
app.include_router(admin_router, prefix="/admin", tags=["Admin"])

@app.get("/health")
async def health():
    return {"status": "ok"}

# Front end forms, kept off / so API paths keep their trailing-slash redirects
if FRONTEND_DIR.is_dir():
    app.mount("/app", StaticFiles(directory=FRONTEND_DIR, html=True), name="frontend")

    @app.get("/", include_in_schema=False)
    async def frontend_root():
        return RedirectResponse(url="/app/")
