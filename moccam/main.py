from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

# --- ADMIN ROUTES ---
from moccam.api.v1.admin import dashboard
from moccam.api.v1.admin import user as admin_user

# --- BILLING ROUTES ---
from moccam.api.v1.billing import payment, plan, user_subscription, voucher

# --- CONTENT ROUTES ---
from moccam.api.v1.content import ai_model, comment, course, hand_motion, lesson, resource

# --- LEARNING ROUTES ---
from moccam.api.v1.learning import activity
from moccam.api.v1.learning import progress as learning_progress

# ===== IMPORT ROUTERS =====
from moccam.api.v1.shares import auth, notification
from moccam.core.exception_handlers import register_exception_handlers
from moccam.core.logger import configure_logging
from moccam.core.settings import settings
from moccam.db.session import Database

# --- MIDDLEWARE ---
from moccam.middleware.request_context import RequestContextMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()

    # ================================
    # 1) DATABASE
    # ================================
    app.state.database = Database()
    logger.info("🗄 Database engine ready")

    # ================================
    # 2) GLOBAL HTTP CLIENT
    # ================================
    app.state.http = httpx.AsyncClient(timeout=30)
    logger.info("🌐 HTTP client started")

    try:
        yield
    finally:
        await app.state.http.aclose()
        logger.info("🌐 HTTP client closed")
        await app.state.database.dispose()


def create_app() -> FastAPI:
    app = FastAPI(
        title="MocCam API",
        description="Backend học ngôn ngữ ký hiệu: khóa học, bài học, gói đăng ký, bảng xếp hạng",
        version="0.1.0",
        lifespan=lifespan,
    )

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)
    register_exception_handlers(app)

    prefix = "/api/v1"

    # --- Share ---
    app.include_router(auth.router, prefix=prefix)
    app.include_router(notification.router, prefix=prefix)

    # --- CONTENT ---
    app.include_router(course.router, prefix=prefix)
    app.include_router(learning_progress.router, prefix=prefix)
    app.include_router(lesson.router, prefix=prefix)
    app.include_router(resource.router, prefix=prefix)
    app.include_router(comment.router, prefix=prefix)
    app.include_router(ai_model.router, prefix=prefix)
    app.include_router(hand_motion.router, prefix=prefix)

    # --- LEARNING ---
    app.include_router(learning_progress.progress_router, prefix=prefix)
    app.include_router(activity.router, prefix=prefix)

    # --- BILLING ---
    app.include_router(voucher.router, prefix=prefix)
    app.include_router(plan.router, prefix=prefix)
    app.include_router(user_subscription.router, prefix=prefix)
    app.include_router(payment.router, prefix=prefix)

    # --- ADMIN ---
    app.include_router(admin_user.router, prefix=prefix)
    app.include_router(dashboard.router, prefix=prefix)

    @app.get("/")
    async def hello_world():
        return {"message": "MocCam API is running"}

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("moccam.main:app", host="0.0.0.0", port=8000, reload=True, log_level="info")
