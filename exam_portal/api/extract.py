from __future__ import annotations

from fastapi import APIRouter

from exam_portal.models.schemas import ExtractRequest, ExtractResponse
from exam_portal.services.answer_service import run_extraction

router = APIRouter(prefix="/api", tags=["extract"])


@router.post("/extract", response_model=ExtractResponse)
async def extract_from_text(payload: ExtractRequest) -> ExtractResponse:
    result = run_extraction(payload.text, payload.question_count, payload.paragraph_fallback)
    return ExtractResponse(answers=result.answers, strategy=result.strategy)
