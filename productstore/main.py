# productstore/main.py
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .core import ProductIn, ProductUpdate
from .database import JsonFileStorage, ProductStorage
from .errors import (
    BAD_REQUEST_TYPE, SERVER_ERROR_TYPE, ProductStoreError, ValidationError,
)
from .logging_config import setup_logging
from .models import Product
from .service import ProductService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_service(request: Request) -> ProductService:
    return request.app.state.service


# ---------------------------
# Problem details
# ---------------------------
def problem(status: int, title: str, type_uri: str, detail: str, **extra: Any) -> JSONResponse:
    body: Dict[str, Any] = {"type": type_uri, "title": title, "status": status, "detail": detail}
    body.update(extra)
    return JSONResponse(body, status_code=status, media_type="application/problem+json")


async def product_store_error_handler(request: Request, exc: ProductStoreError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
    extra = {}
    if isinstance(exc, ValidationError):
        extra["errors"] = [{"field": e.field, "message": e.message} for e in exc.errors]
    return problem(exc.status_code, exc.title, exc.type_uri, exc.detail, **extra)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "path", "query")]
        errors.append({"field": ".".join(loc) or "body", "message": err.get("msg", "invalid")})
    detail = "Invalid request: " + ", ".join(f"{e['field']} ({e['message']})" for e in errors)
    return problem(400, "Bad Request", BAD_REQUEST_TYPE, detail, errors=errors)


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unexpected error on %s %s", request.method, request.url.path)
    return problem(500, "Internal Server Error", SERVER_ERROR_TYPE, f"Unexpected error: {exc}")


# ---------------------------
# Product endpoints
# ---------------------------
@router.get("/products", response_model=List[Product])
async def list_products(service: ProductService = Depends(get_service)):
    return await service.list_all()


@router.get("/products/{product_id}", response_model=Product)
async def get_product(product_id: int, service: ProductService = Depends(get_service)):
    return await service.get_by_id(product_id)


@router.post("/products", status_code=201, response_model=Product)
async def create_product(
    response: Response,
    payload: Optional[ProductIn] = None,
    service: ProductService = Depends(get_service),
):
    product = await service.create(payload or ProductIn())
    response.headers["Location"] = f"/products/{product.id}"
    return product


@router.put("/products/{product_id}", response_model=Product)
async def update_product(
    product_id: int,
    payload: Optional[ProductUpdate] = None,
    service: ProductService = Depends(get_service),
):
    return await service.update(product_id, payload or ProductUpdate())


@router.delete("/products/{product_id}", status_code=204)
async def delete_product(product_id: int, service: ProductService = Depends(get_service)):
    await service.delete(product_id)
    return Response(status_code=204)


@router.get("/health")
async def health(service: ProductService = Depends(get_service)):
    return {"status": "ok", "storage": service.storage.identity}


def create_app(settings: Optional[Settings] = None, storage: Optional[ProductStorage] = None) -> FastAPI:
    """Build the FastAPI application.

    ``storage`` defaults to a ``JsonFileStorage`` at ``settings.products_file``;
    tests pass an ``InMemoryStorage`` or a file under ``tmp_path`` instead.
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_file)

    docs = settings.docs_enabled
    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        docs_url="/docs" if docs else None,
        redoc_url="/redoc" if docs else None,
        openapi_url="/openapi.json" if docs else None,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Location"],
    )

    app.state.settings = settings
    app.state.service = ProductService(storage or JsonFileStorage(settings.products_file))

    app.add_exception_handler(ProductStoreError, product_store_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
    app.include_router(router)

    logger.info("%s using %s", settings.project_name, app.state.service.storage.identity)
    return app


app = create_app()


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
