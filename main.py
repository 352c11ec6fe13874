import os
import importlib
import logging
from fastapi import FastAPI, APIRouter, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.database import settings
from core.exceptions import ConfigurationError, SchemaMissingError, StoreError
from apps.sync.services import build_backend

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# The directory where all application folders are located
APPS_DIRECTORY = "apps"
API_PREFIX = "/api/v1"

# Initialize the main FastAPI application
app = FastAPI(
    title="Compusys Point API",
    description="Customers, repair tickets and bills for a device-repair shop.",
    version="1.0.0",
)

# --- CORS Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=['*'],  # Allows all origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Error Mapping ---
@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": exc.message},
    )


@app.exception_handler(SchemaMissingError)
async def schema_missing_handler(request: Request, exc: SchemaMissingError):
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": exc.message, "table": exc.table, "tablesMissing": True},
    )


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error(f"Store error on {request.method} {request.url.path}: {exc!r}")
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": exc.message, "code": exc.code},
    )


# --- Root Endpoint for Testing ---
@app.get("/")
async def read_root():
    return {"message": "Compusys Point API", "docs": "/docs"}

# --- Dynamic App Discovery and Router Inclusion ---
apps_path = os.path.join(os.path.dirname(__file__), APPS_DIRECTORY)

logger.debug(f"Searching for apps in: {apps_path}")

if not os.path.isdir(apps_path):
    logger.error(f"The directory '{APPS_DIRECTORY}' was not found.")
else:
    for item_name in sorted(os.listdir(apps_path)):
        app_dir = os.path.join(apps_path, item_name)

        if os.path.isdir(app_dir) and not item_name.startswith(('_', '.')):
            module_name = f"{APPS_DIRECTORY}.{item_name}.router"
            try:
                # Import the models first so every table is on the metadata
                if os.path.isfile(os.path.join(app_dir, "models.py")):
                    importlib.import_module(f"{APPS_DIRECTORY}.{item_name}.models")

                router_module = importlib.import_module(module_name)
                router_instance = getattr(router_module, "router", None)

                if router_instance and isinstance(router_instance, APIRouter):
                    app.include_router(
                        router_instance,
                        prefix=f"{API_PREFIX}/{item_name}",
                        tags=[item_name.capitalize()]
                    )
                    logger.info(f"Loaded router from '{item_name}'.")
                else:
                    logger.warning(f"Could not find a valid APIRouter named 'router' in '{module_name}'.")

            except ImportError as e:
                logger.error(f"Failed to import router for '{item_name}': {e}")


# --- Startup Event Handler ---
@app.on_event("startup")
def startup_event():
    """Choose the persistence backend once for the lifetime of the process."""
    app.state.backend = build_backend(settings)
    logger.info("Application is ready to serve requests.")
