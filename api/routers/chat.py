"""
StrikeZone Chat Router
======================
POST /api/chat - runs one question through the inference pipeline.

Status mapping:
- 200 {success, message, sql, results}  answer produced
- 400 {error}                           malformed body (before any model or DB work)
- 500 {success: false, error}           SQL generation, validation or execution failed
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from core.engine import (
    InferencePipeline,
    InputGuard,
    ClientInputError,
    PipelineError,
    create_pipeline
)

from ..models import ChatRequest, ChatResponse, ChatFailure, InputError

logger = logging.getLogger(__name__)

router = APIRouter()

input_guard = InputGuard()

# Global pipeline instance (lazy initialization)
_pipeline_instance: Optional[InferencePipeline] = None


def get_pipeline() -> InferencePipeline:
    """Get or create the inference pipeline instance."""
    global _pipeline_instance

    if _pipeline_instance is None:
        _pipeline_instance = create_pipeline()
        logger.info(
            f"Inference pipeline initialized "
            f"(provider={_pipeline_instance.provider.get_provider_name()}, "
            f"db={_pipeline_instance.config.db_path})"
        )

    return _pipeline_instance


def input_error_response(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content=InputError(error=message).model_dump())


def failure_response(message: str) -> JSONResponse:
    return JSONResponse(status_code=500, content=ChatFailure(error=message).model_dump())


@router.post(
    "/chat",
    responses={
        200: {"model": ChatResponse},
        400: {"model": InputError},
        500: {"model": ChatFailure},
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": ChatRequest.model_json_schema()}},
        }
    },
)
async def chat(request: Request, pipeline: InferencePipeline = Depends(get_pipeline)):
    """
    Answer a natural-language question about MLB pitching statistics.

    Body: ``{"message": "Who had the lowest ERA in 2023?"}``
    """
    try:
        payload = await request.json()
    except ValueError:
        logger.warning("Rejected request body that is not valid JSON")
        return input_error_response(InputGuard.REJECTION_MESSAGE)

    try:
        question = input_guard.check(payload)
    except ClientInputError as e:
        return input_error_response(e.message)

    try:
        result = await asyncio.to_thread(pipeline.process, question)
    except ClientInputError as e:
        return input_error_response(e.message)
    except PipelineError as e:
        logger.error(f"Pipeline failed at stage '{e.stage}': {e.message}")
        return failure_response(e.message)
    except Exception as e:
        logger.exception(f"Unexpected pipeline error: {e}")
        return failure_response(str(e))

    return ChatResponse(**result.to_response()).model_dump()
