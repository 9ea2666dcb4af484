from __future__ import annotations

import json
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import JSONResponse

from cpr_booking.application.dto.intake import IntakeCommand
from cpr_booking.application.dto.stripe_event import StripeEventDTO
from cpr_booking.application.exceptions import WebhookVerificationError
from cpr_booking.application.use_cases.intake import BookingIntakeUseCase, IntakeFailure
from cpr_booking.core.config import settings
from cpr_booking.infrastructure.payments.stripe_signature import is_test_mode, require_valid_signature
from cpr_booking.wiring.dependencies import get_intake_use_case


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/stripe/webhook")
async def stripe_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    use_case: BookingIntakeUseCase = Depends(get_intake_use_case),
):
    body = await request.body()
    signature = request.headers.get("Stripe-Signature")

    if not settings.STRIPE_WEBHOOK_SECRET and not settings.is_dev:
        logger.error("Missing Stripe webhook secret in production environment")
        return JSONResponse(status_code=500, content={"error": "Missing Stripe webhook secret"})

    if is_test_mode(signature, settings.ENV):
        logger.warning("Stripe webhook test mode: bypassing signature verification")
    else:
        try:
            require_valid_signature(
                body,
                signature,
                settings.STRIPE_WEBHOOK_SECRET,
                tolerance_seconds=settings.STRIPE_WEBHOOK_TOLERANCE_SECONDS,
            )
        except WebhookVerificationError as e:
            return JSONResponse(status_code=400, content={"error": str(e)})

    try:
        payload = json.loads(body.decode("utf-8")) if body else {}
        event = StripeEventDTO.model_validate(payload)
    except ValueError:
        logger.exception("Failed to parse webhook body")
        return JSONResponse(status_code=400, content={"error": "Invalid webhook payload"})

    logger.info("Webhook received event", extra={"reason": event.type})

    command = event.extract_intake()
    if command is None:
        return {"received": True}

    # Acknowledge whatever happens downstream; the provider redelivers on non-2xx.
    background_tasks.add_task(process_checkout_session, use_case, command)
    return {"received": True}


def process_checkout_session(use_case: BookingIntakeUseCase, command: IntakeCommand) -> None:
    try:
        outcome = use_case.execute(command)
        logger.info(
            "Checkout session processed",
            extra={"session_id": command.session_id, "booking_id": outcome.booking.id},
        )
    except ValueError as e:
        logger.warning("Checkout session missing booking data", extra={"session_id": command.session_id, "error": str(e)})
    except IntakeFailure as e:
        logger.error("Failed to process checkout session", extra={"session_id": command.session_id, "error": str(e)})
