import logging
from contextlib import asynccontextmanager
from logging.config import dictConfig

from fastapi import FastAPI

from app.config import LogConfig
from app.dependencies.database import init_db
from app.middlewares.middlewares import setup_exception_handlers, setup_middlewares
from app.routers import auth, books, reviews

dictConfig(LogConfig().model_dump())
logger = logging.getLogger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Управління ресурсами під час життєвого циклу API"""

    try:
        await init_db()  # Створення таблиць БД
        logger.info("✅ Таблиці БД готові")
        yield

    except Exception as e:
        logger.error(f"❌ Помилка при запуску сервера: {e}")
        raise e


app = FastAPI(
    lifespan=lifespan,
    title="Book Review API",
    description="API для каталогу книг і відгуків",
    version="1.0",
)

setup_middlewares(app)
setup_exception_handlers(app)

app.include_router(auth.router, prefix="/api")
app.include_router(books.router, prefix="/api")
app.include_router(reviews.router, prefix="/api")


@app.get("/api/health", tags=["Health"])
async def health():
    return {"success": True, "message": "Book Review API is running"}


logger.info("✅ Book Review API успішно запущено!")
