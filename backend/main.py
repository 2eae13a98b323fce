import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from core.auth import auth_backend, fastapi_users
from core.config import settings
from core.logging_config import configure_logging
from db.database import create_db_and_tables
from routers.daily_stock import router as daily_stock_router
from routers.inventory import router as inventory_router
from routers.liquor import router as liquor_router
from routers.other_stock import router as other_stock_router
from routers.setup import router as setup_router
from routers.stock_movement import router as stock_movement_router
from routers.users import router as users_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    await create_db_and_tables()
    yield


app = FastAPI(
    title="Bar Stock Tracker API",
    description="API for tracking liquor and general stock, daily counts and stock movement",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Storage error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Storage operation failed, please retry"},
    )


# Authentication routes (fastapi-users)
app.include_router(fastapi_users.get_auth_router(auth_backend), prefix="/auth/jwt", tags=["auth"])
app.include_router(fastapi_users.get_reset_password_router(), prefix="/auth", tags=["auth"])

# Accounts
app.include_router(setup_router, prefix="/setup", tags=["setup"])
app.include_router(users_router, prefix="/users", tags=["users"])

# Inventory
app.include_router(liquor_router, prefix="/liquor", tags=["liquor"])
app.include_router(other_stock_router, prefix="/other-stock", tags=["other-stock"])
app.include_router(inventory_router, prefix="/inventory", tags=["inventory"])
app.include_router(daily_stock_router, prefix="/daily-stock", tags=["daily-stock"])
app.include_router(stock_movement_router, prefix="/stock-movement", tags=["stock-movement"])

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
