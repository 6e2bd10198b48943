import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from symposium.common.config import get_settings
from symposium.auth import router as auth_router
from symposium.conferences import router as conferences_router
from symposium.talks import router as talks_router
from symposium.home import router as home_router
from symposium.admin import router as admin_router


settings = get_settings()

logging.basicConfig(level=logging.INFO)

app = FastAPI(title=settings.app_name, version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth_router.router, tags=["auth"])
app.include_router(home_router.router, tags=["home"])
app.include_router(conferences_router.router, prefix="/conferences", tags=["conferences"])
app.include_router(talks_router.router, tags=["talks"])
app.include_router(admin_router.router, prefix="/admin", tags=["admin"])


@app.get("/health", tags=["system"])
def health() -> dict:
    """Health check endpoint that pings the database."""
    from sqlalchemy import text
    from symposium.common.db import get_sync_engine

    try:
        with get_sync_engine().connect() as conn:
            conn.execute(text("SELECT 1"))
        db_status = "connected"
    except Exception as e:
        db_status = f"error: {str(e)}"

    return {"status": "ok", "database": db_status}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
