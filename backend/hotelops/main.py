"""
hotelops 主应用入口
酒店事务核心：客房预订、餐饮与采购订单、库存台账
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hotelops import __version__
from hotelops.config import settings
from hotelops.database import init_db
from hotelops.exceptions import HotelOpsError
from hotelops.routers import rooms, bookings, menu, food_orders, suppliers, inventory, purchase_orders

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    configure_logging()
    init_db()
    logger.info(f"{settings.APP_NAME} {__version__} started")
    yield
    logger.info(f"{settings.APP_NAME} shutting down")


app = FastAPI(
    title=settings.APP_NAME,
    description="酒店事务核心 API",
    version=__version__,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HotelOpsError)
async def hotelops_error_handler(request: Request, exc: HotelOpsError):
    """业务异常统一映射为 HTTP 响应"""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.include_router(rooms.router)
app.include_router(bookings.router)
app.include_router(menu.router)
app.include_router(food_orders.router)
app.include_router(suppliers.router)
app.include_router(inventory.router)
app.include_router(purchase_orders.router)


@app.get("/")
def root():
    return {"name": settings.APP_NAME, "version": __version__}


@app.get("/health")
def health_check():
    return {"status": "healthy"}
