# storefront/services/notification_service.py
from uuid import UUID

from storefront.celery_worker import celery_app
from storefront.data.database import SessionLocal
from storefront.domain.schemas import OrderDetailOut
from storefront.repos.order_repo import OrderRepo
from storefront.services import mailer
from storefront.services.invoice import render_invoice_pdf, render_order_placed
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Fire-and-forget notifications.
    Enqueue failures (broker down etc) are logged, never raised: the caller's
    work is already committed.
    """

    @staticmethod
    def send_invoice_email(order_id: UUID) -> bool:
        try:
            send_invoice_email_task.delay(str(order_id))
        except Exception as e:
            logger.error(f"Could not enqueue invoice email for order {order_id}: {e}")
            return False
        logger.info(f"Invoice email queued for order {order_id}")
        return True

    @staticmethod
    def send_test_email(to: str) -> bool:
        try:
            send_test_email_task.delay(to)
        except Exception as e:
            logger.error(f"Could not enqueue test email to {to}: {e}")
            return False
        logger.info(f"Test email queued for {to}")
        return True


@celery_app.task(name="storefront.services.notification_service.send_invoice_email_task")
def send_invoice_email_task(order_id: str):
    """Order-placed email to the customer with the invoice attached."""
    db = SessionLocal()
    try:
        order = OrderRepo(db).get_order(UUID(order_id))
        if not order:
            logger.error(f"[NOTIFICATION] Order {order_id} not found, invoice not sent")
            return {"order_id": order_id, "status": "skipped"}

        detail = OrderDetailOut.model_validate(order)
    finally:
        db.close()

    if not detail.user or not detail.user.email:
        logger.error(f"[NOTIFICATION] Order {order_id} has no customer email, invoice not sent")
        return {"order_id": order_id, "status": "skipped"}

    try:
        msg = mailer.build_message(
            to=[detail.user.email],
            subject="Order placed successfully",
            body=render_order_placed(detail),
            html=True,
            attachments=[("invoice.pdf", render_invoice_pdf(detail), "pdf")],
        )
        mailer.send_mail(msg)
    except Exception as e:
        logger.error(f"[NOTIFICATION] Invoice email for order {order_id} failed: {e}")
        return {"order_id": order_id, "status": "failed"}

    logger.info(f"[NOTIFICATION] Invoice for order {order_id} sent to {detail.user.email}")
    return {"order_id": order_id, "status": "sent"}


@celery_app.task(name="storefront.services.notification_service.send_test_email_task")
def send_test_email_task(to: str):
    msg = mailer.build_message(to=[to], subject="Test Email", body="This is a test email")

    try:
        mailer.send_mail(msg)
    except Exception as e:
        logger.error(f"[NOTIFICATION] Test email to {to} failed: {e}")
        return {"to": to, "status": "failed"}

    logger.info(f"[NOTIFICATION] Test email sent to {to}")
    return {"to": to, "status": "sent"}
