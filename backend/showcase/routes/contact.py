"""
Showcase API: Contact Route Handler
======================================

What:  Handles POST /api/contact, relaying a site visitor's message by email.
How:   Takes {name, email, message} as JSON and asks the Mailer to send the
       acknowledgement to the submitted address. Nothing is stored.
Who:   Called by the site's contact form.

Responses (always HTTP 200):
    {"success": true, "message": "Email Sent Successfully"}
    {"success": false, "error": "<relay or socket error>"}
"""

import logging

from fastapi import APIRouter, Depends

from showcase.middleware.request_id import request_id_var
from showcase.schemas.envelope import ContactResult, ContactSubmission, Failure
from showcase.services.mail_service import Mailer, get_mailer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Contact"])


@router.post(
    "/contact",
    response_model=None,
    responses={200: {"description": "Sent, or failure envelope", "model": ContactResult}},
    summary="Send the contact acknowledgement email",
)
async def contact(
    submission: ContactSubmission,
    mailer: Mailer = Depends(get_mailer),
):
    """
    Send one email to the submitted address.

    No retry on relay failure; success only means the relay accepted the send.
    """
    try:
        await mailer.send_contact_reply(
            name=submission.name,
            email=submission.email,
            message=submission.message,
        )
        return ContactResult()
    except Exception as e:
        logger.warning("[%s] Contact mail failed: %s", request_id_var.get(""), str(e))
        return Failure.from_exception(e)
