import logging

from fastapi import APIRouter, Depends
from google import genai
from pydantic import BaseModel, Field

from classification import DESCRIBE_FOOD_KEYWORDS, classify_item
from config import Settings, get_settings
from gemini.client import generate_with_fallback, get_gemini_client
from gemini.prompts import describe_prompt

logger = logging.getLogger(__name__)

router = APIRouter(tags=["describe"])


# ---------- Request / Response schemas ----------

class DescribeRequest(BaseModel):
    name: str = Field(min_length=1)

    model_config = {"str_strip_whitespace": True}


class DescribeResponse(BaseModel):
    description: str


# ---------- Endpoint ----------

@router.post("/describe", response_model=DescribeResponse)
async def describe_item(
    body: DescribeRequest,
    client: genai.Client = Depends(get_gemini_client),
    settings: Settings = Depends(get_settings),
):
    """Two-sentence description of an exercise or a meal."""
    kind = classify_item(body.name, DESCRIBE_FOOD_KEYWORDS)
    logger.info("Describe %r as %s", body.name, kind.value)

    description = await generate_with_fallback(
        client, describe_prompt(body.name, kind), label="describe",
        pinned=settings.gemini_model,
    )
    return DescribeResponse(description=description)
