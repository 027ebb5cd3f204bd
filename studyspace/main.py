# studyspace/main.py
import logging
from fastapi import FastAPI
from studyspace.api.v1.router import api_router
from studyspace.core.config import settings

logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = FastAPI(
    title="Study Space API",
    description="A document viewer session with an AI study assistant, plus image-scan and chat relays.",
    version="1.0.0",
)

# Include the main router from our API module
app.include_router(api_router, prefix="/api/v1")

@app.get("/", tags=["Root"])
def read_root():
    return {"message": "Welcome to the Study Space API. Visit /docs for API documentation."}
