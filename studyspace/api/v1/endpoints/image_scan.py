# studyspace/api/v1/endpoints/image_scan.py
import logging
from typing import Optional
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from studyspace.core.services.image_scan import ImageScanService, MissingApiKeyError, ScanAction, UpstreamError
from studyspace.dependencies import get_image_scan_service
from studyspace.models.schemas import ImageScanRequest, ScanResult

router = APIRouter()

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})

def _validate(request: ImageScanRequest) -> Optional[JSONResponse]:
    if not request.imageBase64 or not request.mimeType:
        return _error(400, "Missing image data.")
    if request.action not in {action.value for action in ScanAction}:
        return _error(400, f"Unsupported action: {request.action}. Use 'scan' or 'refine'.")
    return None

@router.post("")
async def scan_image(request: ImageScanRequest, service: ImageScanService = Depends(get_image_scan_service)):
    """Extract and classify the text of an image, or refine a text into a prompt, through Gemini."""
    invalid = _validate(request)
    if invalid is not None:
        return invalid
    try:
        data = await service.generate(ScanAction(request.action), request.imageBase64, request.mimeType, request.currentText or "")
    except MissingApiKeyError as e:
        return _error(500, str(e))
    except UpstreamError as e:
        return _error(e.status_code, e.message)
    except Exception as e:
        logging.error(f"Server Error: {e}")
        return JSONResponse(status_code=500, content={"error": "Internal server error", "message": str(e)})
    return data

@router.post("/classify", response_model=ScanResult)
async def classify_image(request: ImageScanRequest, service: ImageScanService = Depends(get_image_scan_service)):
    """Scan an image and return its text split into problem and prompt-template parts."""
    request.action = ScanAction.SCAN.value
    invalid = _validate(request)
    if invalid is not None:
        return invalid
    try:
        return await service.classify(request.imageBase64, request.mimeType)
    except MissingApiKeyError as e:
        return _error(500, str(e))
    except UpstreamError as e:
        return _error(e.status_code, e.message)
    except Exception as e:
        logging.error(f"Server Error: {e}")
        return JSONResponse(status_code=500, content={"error": "Internal server error", "message": str(e)})

@router.api_route("", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def image_scan_method_not_allowed():
    return _error(405, "Method not allowed. Use POST.")
