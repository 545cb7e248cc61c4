"""Flashcard generation route."""

import logging
from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import List, Optional

from flashcard_api.services.auth import require_generation_access
from flashcard_api.services.flashcard.generator import generate_flashcards
from .utils import ClientDisconnected, read_submission, run_until_disconnected

logger = logging.getLogger(__name__)
router = APIRouter()

EMPTY_RESULT_MESSAGE = "No flashcards could be generated from the provided material."


class FlashcardItem(BaseModel):
    question: str
    answer: str


class FlashcardResponse(BaseModel):
    flashcards: List[FlashcardItem]
    error: Optional[str] = None


@router.post("/generate-flashcards", response_model=FlashcardResponse, response_model_exclude_none=True)
async def create_flashcards(
    request: Request,
    notes: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    image: Optional[UploadFile] = File(None),
    current_user=Depends(require_generation_access),
):
    # "image" is the field name older clients use for the upload
    submission = await read_submission(notes, file or image)
    logger.info(
        "Generation request from user %s (notes=%s image=%s audio=%s)",
        current_user.id, submission.has_notes, bool(submission.image), bool(submission.audio),
    )

    try:
        result = await run_until_disconnected(request, generate_flashcards(submission))
    except ClientDisconnected:
        # Nobody is listening; nginx convention for "client closed request"
        return Response(status_code=499)

    if result.empty:
        return JSONResponse(content={"flashcards": [], "error": EMPTY_RESULT_MESSAGE})
    return FlashcardResponse(
        flashcards=[FlashcardItem(**card.to_dict()) for card in result.flashcards]
    )
