from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from bazos_scraper.api.v1.endpoints import search
from bazos_scraper.core.config import settings
from bazos_scraper.core.logging import configure_logging

configure_logging()

app = FastAPI(title=settings.PROJECT_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(search.router, prefix="/api/v1/search", tags=["search"])

@app.get("/health")
def health_check():
    return {"status": "ok"}
