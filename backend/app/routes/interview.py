"""Interview routes — the two model-backed endpoints the wizard calls.

Endpoints:
  POST /api/next-question      — Generate the A/B question for a step
  POST /api/generate-blueprint — Synthesize the final business blueprint
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from ..agents.interview_agent.generator import generate_blueprint, generate_question
from ..constants import MAX_STEPS
from ..errors import GatewayError, SchemaError
from ..schemas.blueprint_schema import (
    ErrorResponse,
    GenerateBlueprintRequest,
    GenerateBlueprintResponse,
)
from ..schemas.question_schema import NextQuestionRequest, NextQuestionResponse
from ..services.model_gateway import ModelGateway

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["Interview"],
    responses={
        500: {"model": ErrorResponse, "description": "Model backend failure"},
    },
)


# ── Dependencies ─────────────────────────────────────────────────────────

def get_model_gateway(request: Request) -> ModelGateway:
    """Return the gateway built at startup (see main.lifespan)."""
    gateway = getattr(request.app.state, "model_gateway", None)
    if gateway is None:
        raise GatewayError("Model gateway is not initialised")
    return gateway


def _failure(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(error=message).model_dump(),
    )


# ── Routes ───────────────────────────────────────────────────────────────

@router.post(
    "/next-question",
    response_model=NextQuestionResponse,
    response_model_exclude_none=True,
    summary="Generate Next Question",
    response_description="The next A/B question, or done=true past the last step",
)
async def next_question(
    body: NextQuestionRequest,
    gateway: ModelGateway = Depends(get_model_gateway),
):
    """Generate the personalized A/B question for ``body.step``.

    Rules:
    - step > MAX_STEPS → {success: true, done: true}, no model call
    - Model failure or a question without exactly two options → 500
    """
    if body.step > MAX_STEPS:
        return NextQuestionResponse(success=True, done=True)

    try:
        question = await generate_question(
            gateway,
            step=body.step,
            user_input=body.user_input,
            history=body.history,
        )
    except (GatewayError, SchemaError) as exc:
        logger.error("Error generating question for step %d: %s", body.step, exc)
        return _failure("Failed to generate next question")

    return NextQuestionResponse(success=True, done=False, question=question)


@router.post(
    "/generate-blueprint",
    response_model=GenerateBlueprintResponse,
    summary="Generate Business Blueprint",
    response_description="Normalized blueprint — every field always present",
)
async def generate_blueprint_route(
    body: GenerateBlueprintRequest,
    gateway: ModelGateway = Depends(get_model_gateway),
):
    """Synthesize the blueprint from the user's description and all answers."""
    try:
        blueprint = await generate_blueprint(
            gateway,
            user_input=body.user_input,
            history=body.history,
        )
    except GatewayError as exc:
        logger.error("Error in /api/generate-blueprint: %s", exc)
        return _failure("Server error while generating blueprint")

    return GenerateBlueprintResponse(success=True, blueprint=blueprint)
