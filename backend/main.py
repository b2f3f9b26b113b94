# backend/main.py
import logging
import time

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from database import init_db
from utils.errors import AppError

# Router imports
from routes.users import router as users_router
from routes.products import router as products_router
from routes.goods_in import router as goods_in_router
from routes.goods_out import router as goods_out_router
from routes.dashboard import router as dashboard_router
from routes.vendors import router as vendors_router
from routes.reference import (
    category_router,
    note_type_router,
    storage_location_router,
    supplier_router,
    customer_router,
)

# Logging configuration
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger("app")

# Initialisation
init_db()

app = FastAPI(title="Inventory Ledger API", version="1.0.0")

# CORS Configuration
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


# Request logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    duration = round((time.time() - start_time) * 1000, 2)
    logger.info("%s %s Status: %s Time: %sms", request.method, request.url.path, response.status_code, duration)
    return response


# Error handling - every error leaves in the same envelope as successful responses
def _error_response(status_code: int, message: str, details=None) -> JSONResponse:
    body = {"code": status_code, "status": "error", "message": message}
    if details is not None:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    details = [
        {"field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
         "message": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return _error_response(400, "Validation failed", details)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error_response(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(500, "Internal server error")


# Router registration
app.include_router(users_router)
app.include_router(products_router)
app.include_router(goods_in_router)
app.include_router(goods_out_router)
app.include_router(dashboard_router)
app.include_router(category_router)
app.include_router(note_type_router)
app.include_router(storage_location_router)
app.include_router(supplier_router)
app.include_router(customer_router)
app.include_router(vendors_router)


@app.get("/")
def read_root():
    return {"code": 200, "status": "success", "message": "Inventory Ledger API is running", "data": None}
