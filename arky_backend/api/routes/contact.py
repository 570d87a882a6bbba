from typing import Annotated

from fastapi import APIRouter, Depends

from arky_backend.api.dependencies import get_contact_service
from arky_backend.core.rate_limit import enforce_contact_rate_limit
from arky_backend.schemas.contact import ContactResponse, ContactSubmission
from arky_backend.services.contact_service import ContactService

router = APIRouter(tags=["Contact"])


@router.post(
    "/contact",
    response_model=ContactResponse,
    dependencies=[Depends(enforce_contact_rate_limit)],
)
async def contact(
    submission: ContactSubmission,
    service: Annotated[ContactService, Depends(get_contact_service)],
) -> ContactResponse:
    """Send a contact form submission to the sales inbox.

    Raises:
        ValidationAppError: 400 when first name or email is missing.
        RateLimitAppError: 429 when the client exceeded the contact limit.
        ConfigurationAppError: 500 when SMTP credentials are missing.
        UpstreamServiceError: 500 when the email cannot be sent.
    """
    await service.submit(submission)
    return ContactResponse()
