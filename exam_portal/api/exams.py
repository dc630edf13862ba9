from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, UploadFile

from exam_portal.models.schemas import (
    AnswerSheet,
    AnswerUpdate,
    Exam,
    ExamsResponse,
    ImportResponse,
    SubmitResponse,
)
from exam_portal.services.answer_service import (
    AnswerSheetStore,
    QuestionNotFoundError,
    SheetLockedError,
    get_answer_store,
    import_answers,
)
from exam_portal.services.exam_service import ExamNotFoundError, get_exam, list_exams
from exam_portal.services.pdf_service import read_answer_text

router = APIRouter(prefix="/api", tags=["exams"])

_NOTHING_EXTRACTED = (
    "Could not extract any answers from the uploaded file. "
    "Label answers as 'Question 1: ...' or number them '1. ...' and try again."
)


def _exam_or_404(exam_id: int) -> Exam:
    try:
        return get_exam(exam_id)
    except ExamNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.get("/exams", response_model=ExamsResponse)
async def get_exams() -> ExamsResponse:
    return ExamsResponse(exams=list_exams())


@router.get("/exams/{exam_id}", response_model=Exam)
async def get_exam_by_id(exam_id: int) -> Exam:
    return _exam_or_404(exam_id)


@router.get("/exams/{exam_id}/answers", response_model=AnswerSheet)
async def get_answer_sheet(
    exam_id: int,
    store: AnswerSheetStore = Depends(get_answer_store),
) -> AnswerSheet:
    return store.get_sheet(_exam_or_404(exam_id))


@router.put("/exams/{exam_id}/answers/{question_id}", response_model=AnswerSheet)
async def update_answer(
    exam_id: int,
    question_id: int,
    payload: AnswerUpdate,
    store: AnswerSheetStore = Depends(get_answer_store),
) -> AnswerSheet:
    exam = _exam_or_404(exam_id)
    try:
        return store.set_answer(exam, question_id, payload.text)
    except QuestionNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except SheetLockedError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc


@router.post("/exams/{exam_id}/answers/import", response_model=ImportResponse)
async def import_answer_file(
    exam_id: int,
    file: UploadFile,
    store: AnswerSheetStore = Depends(get_answer_store),
) -> ImportResponse:
    exam = _exam_or_404(exam_id)
    if not file.filename:
        raise HTTPException(status_code=400, detail="Filename is required")

    content = await file.read()
    try:
        text = read_answer_text(file.filename, content)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    try:
        outcome = import_answers(exam, text, store=store)
    except SheetLockedError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    extracted = outcome.extraction.answers
    return ImportResponse(
        sheet=outcome.sheet,
        extracted=extracted,
        extracted_count=len(extracted),
        bound_question_ids=outcome.bound_question_ids,
        strategy=outcome.extraction.strategy,
        message=None if extracted else _NOTHING_EXTRACTED,
    )


@router.post("/exams/{exam_id}/submit", response_model=SubmitResponse)
async def submit_exam(
    exam_id: int,
    store: AnswerSheetStore = Depends(get_answer_store),
) -> SubmitResponse:
    exam = _exam_or_404(exam_id)
    try:
        return store.submit(exam)
    except SheetLockedError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
