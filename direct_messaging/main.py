from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Optional

from fastapi import Depends, FastAPI
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from direct_messaging.config import APP_ADDR, APP_PORT, COMMIT_HASH, ENV
from direct_messaging.database import close_db, get_db, init_db
from direct_messaging.logging_config import configure_logging
from direct_messaging.realtime.notifier import notifier
from direct_messaging.routers.attachments import router as attachments_router
from direct_messaging.routers.conversations import router as conversations_router
from direct_messaging.routers.realtime import router as realtime_router

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown."""
    # Startup
    await init_db()
    yield
    # Shutdown
    await notifier.drain()
    await close_db()


app = FastAPI(
    title="Direct Messaging Service",
    description="Two-party conversations with PDF attachments and realtime fan-out",
    version=COMMIT_HASH or "dev",
    lifespan=lifespan,
)

# Include routers
app.include_router(
    conversations_router,
    prefix="/api/messages/conversations",
    tags=["conversations"],
)
app.include_router(
    attachments_router, prefix="/api/messages/attachments", tags=["attachments"]
)
app.include_router(realtime_router, prefix="/ws", tags=["realtime"])


@app.get("/health")
async def health_check(
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Optional[str]]:
    """Health check endpoint with database connectivity."""
    try:
        # Test database connection
        result = await db.execute(text("SELECT 1"))
        db_status = "connected" if result.scalar() == 1 else "error"
    except Exception:
        db_status = "disconnected"

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "database": db_status,
        "environment": ENV,
        "version": COMMIT_HASH,
    }


# If run directly, start the server
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=APP_ADDR, port=APP_PORT)
