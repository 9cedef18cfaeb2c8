import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from budgetly.config import APP_NAME, CORS_ORIGINS, SEED_DEMO_DATA
from budgetly.database import SessionLocal, init_db
from budgetly.errors import NotFoundError, ValidationError
from budgetly.routes.analytics_routes import router as analytics_router
from budgetly.routes.finance_routes import router as finance_router
from budgetly.routes.goal_routes import router as goal_router
from budgetly.routes.notification_routes import router as notification_router
from budgetly.routes.user_routes import router as user_router
from budgetly.seed import seed_database

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Initializing database...")
    init_db()
    if SEED_DEMO_DATA:
        db = SessionLocal()
        try:
            seed_database(db)
        finally:
            db.close()
    yield


async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def validation_error_handler(request: Request, exc: ValidationError):
    content = {"detail": str(exc)}
    if exc.field:
        content["field"] = exc.field
    return JSONResponse(status_code=400, content=content)


def create_app(init_database: bool = True) -> FastAPI:
    app = FastAPI(title=APP_NAME, lifespan=lifespan if init_database else None)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)

    @app.get("/api/v1/health-check")
    def health():
        return {"status": "ok", "message": "Backend is alive!"}

    app.include_router(user_router)
    app.include_router(finance_router)
    app.include_router(goal_router)
    app.include_router(analytics_router)
    app.include_router(notification_router)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("budgetly.main:app", host="0.0.0.0", port=8000, reload=True)
