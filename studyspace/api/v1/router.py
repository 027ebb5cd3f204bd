from fastapi import APIRouter
from studyspace.api.v1.endpoints import session, chat, image_scan

api_router = APIRouter()
api_router.include_router(session.router, prefix="/session", tags=["Study Session"])
api_router.include_router(chat.router, prefix="/chat", tags=["Chat"])
api_router.include_router(image_scan.router, prefix="/image-scan", tags=["Image Scan"])
