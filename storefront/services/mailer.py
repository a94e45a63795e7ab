# storefront/services/mailer.py
import smtplib
from email.message import EmailMessage
from typing import Iterable, Tuple, Union

from storefront.utils.retry import smtp_retry
from storefront.utils.settings import (
    MAIL_HOST,
    MAIL_PORT,
    MAIL_USERNAME,
    MAIL_PASSWORD,
    MAIL_USE_TLS,
    MAIL_FROM,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# (filename, content, subtype) e.g. ("invoice.pdf", b"%PDF..", "pdf")
# str content goes out as text/<subtype>, bytes as application/<subtype>
Attachment = Tuple[str, Union[str, bytes], str]


def build_message(
    to: Iterable[str],
    subject: str,
    body: str,
    html: bool = False,
    attachments: Iterable[Attachment] = (),
) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = MAIL_FROM
    msg["To"] = ", ".join(to)
    msg["Subject"] = subject

    if html:
        msg.set_content("This message requires an HTML capable mail client.")
        msg.add_alternative(body, subtype="html")
    else:
        msg.set_content(body)

    for filename, content, subtype in attachments:
        if isinstance(content, bytes):
            msg.add_attachment(content, maintype="application", subtype=subtype, filename=filename)
        else:
            msg.add_attachment(content, subtype=subtype, filename=filename)

    return msg


@smtp_retry()
def send_mail(msg: EmailMessage) -> None:
    logger.info(f"SMTP {MAIL_HOST}:{MAIL_PORT} -> {msg['To']} ({msg['Subject']})")

    with smtplib.SMTP(MAIL_HOST, MAIL_PORT, timeout=10) as smtp:
        if MAIL_USE_TLS:
            smtp.starttls()
        if MAIL_USERNAME:
            smtp.login(MAIL_USERNAME, MAIL_PASSWORD)
        smtp.send_message(msg)
