# main.py
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

# --- Local Module Imports ---
# config must come first: it loads the .env file
import config
from logging_setup import setup_logging
from routers import tasks
from storage import PersistenceError
from task_store import TaskStore

logger = logging.getLogger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Content-Type"]


def create_app(tasks_file: Optional[Path] = None, frontend_dir: Optional[Path] = None) -> FastAPI:
    tasks_file = Path(tasks_file or config.TASKS_FILE)
    frontend_dir = Path(frontend_dir or config.FRONTEND_DIR)

    # --- App Lifecycle (Lifespan) ---
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Hydrates the task store on startup."""
        # `uvicorn main:app` leaves the root logger bare; `python main.py` and the CLI have set it up already.
        if not logging.getLogger().handlers:
            setup_logging(config.LOG_LEVEL, config.LOG_FILE)
        logger.info("Application starting up, tasks file: %s", tasks_file)
        app.state.task_store = TaskStore(tasks_file)
        yield
        logger.info("Application shutting down.")

    # --- FastAPI App Initialization ---
    app = FastAPI(
        title="Task Manager",
        description="A small task-tracking API backed by a JSON file.",
        version="1.0.0",
        lifespan=lifespan,
    )

    origins = config.cors_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )

    # CORSMiddleware only answers requests that carry an Origin header;
    # API responses get the headers regardless when every origin is allowed.
    @app.middleware("http")
    async def api_cors_headers(request: Request, call_next):
        response = await call_next(request)
        if "*" in origins and request.url.path.startswith(tasks.router.prefix):
            response.headers.setdefault("Access-Control-Allow-Origin", "*")
            response.headers.setdefault("Access-Control-Allow-Methods", ", ".join(CORS_METHODS))
            response.headers.setdefault("Access-Control-Allow-Headers", ", ".join(CORS_HEADERS))
        return response

    # --- Error Mapping ---
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request: Request, exc: PersistenceError):
        logger.error("Request %s %s failed to persist: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Failed to save tasks"},
        )

    # --- Include API Routers ---
    app.include_router(tasks.router)

    # CORS preflight without Origin headers still gets an empty 200.
    @app.options("/{path:path}", include_in_schema=False)
    async def preflight(path: str):
        return Response(status_code=200)

    # --- Root Endpoint ---
    @app.get("/", include_in_schema=False)
    async def read_root():
        """Serves the frontend index.html file."""
        index = frontend_dir / "index.html"
        if not index.is_file():
            raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="File not found")
        return FileResponse(index)

    # --- Mount Static Files (last, it matches every path) ---
    if frontend_dir.is_dir():
        app.mount("/", StaticFiles(directory=frontend_dir, html=True), name="frontend")
    else:
        logger.warning("Frontend directory %s not found, static files disabled.", frontend_dir)

    return app


app = create_app()

# --- Main Entry Point ---
if __name__ == "__main__":
    setup_logging(config.LOG_LEVEL, config.LOG_FILE)
    uvicorn.run(app, host=config.HOST, port=config.PORT, log_config=None)
