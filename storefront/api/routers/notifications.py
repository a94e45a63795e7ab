from fastapi import APIRouter

from storefront.domain.schemas import Envelope, SendTestEmailIn
from storefront.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.post("/test-email", response_model=Envelope[dict], status_code=202)
def send_test_email(payload: SendTestEmailIn):
    queued = NotificationService.send_test_email(payload.to)
    message = "Test email queued" if queued else "Test email could not be queued"
    return Envelope(message=message, data={"to": payload.to, "queued": queued})
