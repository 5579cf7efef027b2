"""Dawa marketplace API service entrypoint."""

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from services.api.app.db.init_db import init_db
from services.api.app.routers.admin import router as admin_router
from services.api.app.routers.customer import router as customer_router
from services.api.app.routers.delivery import router as delivery_router
from services.api.app.routers.shopping import router as shopping_router
from services.api.app.routers.vendor import router as vendor_router
from services.api.app.utils.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
)

app = FastAPI(title="Dawa Marketplace API")

app.include_router(customer_router)
app.include_router(vendor_router)
app.include_router(delivery_router)
app.include_router(admin_router)
app.include_router(shopping_router)


@app.on_event("startup")
def _startup() -> None:
    configure_logging()
    init_db()


@app.middleware("http")
async def _request_context(request: Request, call_next):
    clear_request_context()
    bind_request_context(
        method=request.method,
        path=request.url.path,
        principal_id=request.headers.get("x-principal-id"),
    )
    return await call_next(request)


@app.exception_handler(RequestValidationError)
async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
