"""FastAPI application: storefront, admin and vendor surfaces."""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from marketplace.api.deps import admin_caller, vendor_caller
from marketplace.api.routes import admin, storefront, vendor
from marketplace.api.routes.catalog import build_catalog_router
from marketplace.api.services import Services
from marketplace.db.connection import Database, get_database
from marketplace.kafka.producer import KafkaProducer, get_kafka_producer
from shared.errors import AppError

logger = logging.getLogger(__name__)


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.message})


async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'][1:]) or 'body'}: {error['msg']}"
        for error in exc.errors()
    )
    return JSONResponse(status_code=400, content={"success": False, "error": f"Invalid request. {problems}"})


def create_app(database: Optional[Database] = None, kafka: Optional[KafkaProducer] = None) -> FastAPI:
    if database is None:
        database = get_database()
    if kafka is None:
        kafka = get_kafka_producer()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        kafka.flush()

    app = FastAPI(title="Marketplace Catalog API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.services = Services(database, kafka)

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    app.include_router(storefront.router)
    # admin/vendor specific routes go first so fixed paths win over /{entity_id}
    app.include_router(admin.router)
    app.include_router(vendor.router)
    app.include_router(build_catalog_router(admin_caller, "/api/admin", ["admin"]))
    app.include_router(build_catalog_router(vendor_caller, "/api/vendor", ["vendor"]))

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


def main():
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    database = get_database()
    database.init_tables()
    uvicorn.run(create_app(database), host="0.0.0.0", port=int(os.getenv("PORT", "8000")))


if __name__ == "__main__":
    main()
