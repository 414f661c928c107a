from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from wrapcommand.core.config import settings
from wrapcommand.core.errors import WrapCommandError
from wrapcommand.core.logger import get_logger
from wrapcommand.core.middleware import log_requests
from wrapcommand.routes.quote_router import quote_router
from wrapcommand.routes.vehicle_router import vehicle_router
from wrapcommand.services.execution_gate import default_agent_registry
from wrapcommand.services.pricing_service import default_price_table
from wrapcommand.services.vehicle_size_service import load_default_catalog

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.catalog = load_default_catalog()
    app.state.price_table = default_price_table()
    app.state.agent_registry = default_agent_registry()
    logger.info(f"{settings.app_name} startup complete")

    yield

    logger.info(f"{settings.app_name} shutdown initiated")


app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.middleware("http")(log_requests)


@app.exception_handler(WrapCommandError)
async def wrapcommand_error_handler(request: Request, exc: WrapCommandError):
    logger.warning(f"{request.url.path} failed with {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Invalid body on {request.url.path}: {exc.errors()}")
    details = [
        {"field": ".".join(str(p) for p in err.get("loc", ())[1:]), "message": err.get("msg")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": "Invalid request body", "details": details})


app.include_router(quote_router)
app.include_router(vehicle_router)
