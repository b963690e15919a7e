import logging
from email.message import EmailMessage

import aiosmtplib

from backend.core import config
from backend.core.errors import NotificationError

logger = logging.getLogger(__name__)

CREDENTIALS_SUBJECT = 'Your homework portal account'


def is_configured() -> bool:
    return bool(config.SMTP_HOST)


def build_credentials_message(to_address: str, username: str, password: str) -> EmailMessage:
    message = EmailMessage()
    message['From'] = config.MAIL_FROM
    message['To'] = to_address
    message['Subject'] = CREDENTIALS_SUBJECT
    message.set_content(
        f'An account has been created for you on the homework portal.\n\n'
        f'Username: {username}\n'
        f'Password: {password}\n\n'
        f'Please keep these details private.\n'
    )
    return message


async def _deliver(message: EmailMessage) -> None:
    try:
        await aiosmtplib.send(
            message,
            hostname=config.SMTP_HOST,
            port=config.SMTP_PORT,
            username=config.SMTP_USERNAME or None,
            password=config.SMTP_PASSWORD or None,
            start_tls=config.SMTP_START_TLS,
        )
    except (aiosmtplib.SMTPException, OSError) as exc:
        raise NotificationError() from exc


async def send_credentials_email(to_address: str, username: str, password: str) -> bool:
    """Email new credentials. Failures are logged and reported as ``False``."""
    if not is_configured():
        logger.warning('SMTP is not configured; credentials for %r were not emailed', username)
        return False

    try:
        await _deliver(build_credentials_message(to_address, username, password))
    except NotificationError:
        logger.exception('Failed to email credentials for %r to %s', username, to_address)
        return False

    logger.info('Emailed credentials for %r to %s', username, to_address)
    return True
