import logging

from fastapi import APIRouter, HTTPException

from cpr_booking.api.v1.schemas import ContactSchema, PhoneValidationSchema
from cpr_booking.application.utils.normalizers import normalize_phone
from cpr_booking.core.config import settings

router = APIRouter()
logger = logging.getLogger(__name__)

PHONE_SAMPLES = ("(555) 123-4567", "555-123-4567", "1-555-123-4567", "+1 555-123-4567", "5551234567", "", "abc123")


@router.post("/validate-phone")
def validate_phone(req: PhoneValidationSchema):
    if not req.phone:
        raise HTTPException(status_code=400, detail="Phone number is required")

    formatted = normalize_phone(req.phone, settings.PLACEHOLDER_PHONE)
    return {
        "original": req.phone,
        "formatted": formatted,
        "isValid": bool(formatted),
        "message": "Phone number formatted for SimplyBook.me",
    }


@router.get("/validate-phone")
def phone_examples():
    results = []
    for phone in PHONE_SAMPLES:
        formatted = normalize_phone(phone, settings.PLACEHOLDER_PHONE)
        results.append({"original": phone, "formatted": formatted, "isValid": bool(formatted)})
    return {"message": "Phone validation examples", "results": results}


@router.post("/contact")
def contact(req: ContactSchema):
    if not req.name or not req.email or not req.message:
        raise HTTPException(status_code=400, detail="Name, email, and message are required")

    logger.info(
        "Contact form submission received",
        extra={"reason": f"name={req.name} email={req.email} phone={req.phone or 'Not provided'}"},
    )
    logger.info("Contact message: %s", req.message)
    return {
        "message": "Contact form submitted successfully. Our team will review your message and contact you directly.",
    }
