from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from config import settings
from db import Base, engine
from recommendations.routes import router as recommendations_router
import recommendations.models  # noqa: F401  registers tables on Base.metadata

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logging.info("App starting")
settings.validate()

app = FastAPI(title="College Advisor API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

Base.metadata.create_all(bind=engine)

app.include_router(recommendations_router)


@app.get("/", tags=["meta"])
def root():
    return {"status": "ok", "service": "college-advisor"}
