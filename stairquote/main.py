from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from .config import settings
from .database import engine, Base
from .routers import stairs

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("stairquote")

# Create tables (handles new tables but won't add columns to existing ones)
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Stair Quote",
    description="Stair and millwork pricing for the shop back office",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(stairs.router, prefix="/api")


@app.get("/health")
def health():
    return {"status": "ok", "app": "stairquote", "company": settings.COMPANY_NAME}


@app.on_event("startup")
def auto_seed():
    """Seed the default stair catalog on first run."""
    if not settings.SEED_DEFAULT_CATALOG:
        return
    from .database import SessionLocal
    db = SessionLocal()
    try:
        seeded = stairs.seed_default_catalog(db)
        logger.info("Stair catalog seed: %s", seeded)
    finally:
        db.close()
