import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from google import genai
from pydantic import BaseModel, ValidationError

from config import Settings, get_settings
from errors import ErrorKind, ServiceError
from gemini.client import analyze_with_fallback, get_gemini_client
from gemini.prompts import BODY_ANALYSIS_PROMPT
from json_repair import parse_llm_json
from models.analysis import BodyAnalysis

logger = logging.getLogger(__name__)

router = APIRouter(tags=["analyze"])

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/jpg", "image/png"}
MAX_IMAGE_BYTES = 10 * 1024 * 1024


# ---------- Response schema ----------

class AnalyzeResponse(BaseModel):
    success: bool = True
    data: BodyAnalysis


# ---------- Endpoint ----------

@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_photo(
    image: Optional[UploadFile] = File(default=None),
    client: genai.Client = Depends(get_gemini_client),
    settings: Settings = Depends(get_settings),
):
    """
    Estimates gender, fitness level, body fat, weight range and posture from
    a JPEG/PNG photo (max 10MB) using Gemini vision.
    """
    if image is None:
        raise ServiceError(ErrorKind.INVALID_INPUT, "Missing image file")
    if image.content_type not in ALLOWED_IMAGE_TYPES:
        raise ServiceError(
            ErrorKind.INVALID_INPUT,
            "Invalid file type. Only JPEG and PNG images are allowed",
        )

    content = await image.read()
    if not content:
        raise ServiceError(ErrorKind.INVALID_INPUT, "Failed to process image file")
    if len(content) > MAX_IMAGE_BYTES:
        raise ServiceError(ErrorKind.INVALID_INPUT, "Image size must be less than 10MB")

    text = await analyze_with_fallback(
        client, content, image.content_type, BODY_ANALYSIS_PROMPT,
        pinned=settings.gemini_model,
    )
    data = parse_llm_json(text)

    try:
        return AnalyzeResponse(data=BodyAnalysis.model_validate(data))
    except ValidationError as exc:
        logger.error("Body analysis incomplete: %s", exc)
        raise ServiceError(
            ErrorKind.MALFORMED_UPSTREAM,
            "Incomplete analysis data received",
            details="Please try again with a clearer photo.",
        ) from exc
