from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from fastapi import Request
from fastapi.responses import JSONResponse
import logging

from perangkat_ajar.database import init_db
from perangkat_ajar.config import Config
from perangkat_ajar.routes import calendar, planning, suggest, sync
from perangkat_ajar.services.path_resolver import InvalidScope
from perangkat_ajar.services.suggestion_service import SuggestionError
from perangkat_ajar.services.sync_service import MasterDataNotPopulated

logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Init DB
    await init_db()
    yield
    # Shutdown

app = FastAPI(title="Perangkat Ajar Sync Backend", lifespan=lifespan)

origins = [
    Config.FRONTEND_URL,
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


def _with_cors(request: Request, response: JSONResponse) -> JSONResponse:
    # Re-add CORS headers manually for error responses
    origin = request.headers.get("origin")
    if origin in origins:
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
    return response


@app.exception_handler(MasterDataNotPopulated)
async def master_missing_handler(request: Request, exc: MasterDataNotPopulated):
    return _with_cors(request, JSONResponse(
        status_code=404,
        content={"detail": str(exc), "family": exc.family.value, "path": "/".join(exc.path)},
    ))

@app.exception_handler(SuggestionError)
async def suggestion_error_handler(request: Request, exc: SuggestionError):
    logging.error(f"Suggestion failed: {exc}")
    return _with_cors(request, JSONResponse(status_code=502, content={"detail": str(exc)}))

@app.exception_handler(InvalidScope)
async def invalid_scope_handler(request: Request, exc: InvalidScope):
    return _with_cors(request, JSONResponse(status_code=422, content={"detail": str(exc)}))

# Global Exception Handler to ensure CORS headers are present even on 500 errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logging.error(f"Global Exception: {exc}", exc_info=True)
    return _with_cors(request, JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error", "message": str(exc)},
    ))

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(planning.router)
app.include_router(calendar.router)
app.include_router(sync.router)
app.include_router(suggest.router)

@app.get("/")
def root():
    return {"message": "Perangkat Ajar Sync Backend Online"}
