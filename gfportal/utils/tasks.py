# Global Friendship Portal
# Copyright (C) 2025 Giovani per la Pace, Global Friendship organizing team
#
# This file is part of Global Friendship Portal and is dual-licensed:
#
# 1. Under the terms of the GNU Affero General Public License (AGPL) version 3,
#    as published by the Free Software Foundation. You may use, modify, and
#    distribute this file under those terms.
#
# 2. Under a commercial license, allowing use in closed-source or proprietary
#    environments without the obligations of the AGPL.
#
# If you have obtained this file under the AGPL, and you make it available over
# a network, you must also make the complete source code available under the same license.
#
# For more information or to purchase a commercial license, contact:
# info@giovaniperlapace.it
#
# SPDX-License-Identifier: AGPL-3.0-or-later OR Proprietary
import logging
import traceback
from dataclasses import dataclass
from typing import Optional

from django.conf import settings as conf_settings
from django.core.exceptions import ImproperlyConfigured
from django.core.mail import EmailMultiAlternatives, get_connection

from gfportal.models.miscellanea import EmailSettings
from gfportal.utils.email_template import html_to_text

logger = logging.getLogger(__name__)


@dataclass
class MailCredentials:
    sender_email: str
    username: str
    password: str


def get_mail_credentials() -> MailCredentials:
    """Resolve the sender identity for outgoing mail.

    Values stored in the email settings row take precedence over the ones
    configured in the Django settings.
    """
    email_settings = EmailSettings.load()
    configured_sender = (email_settings.sender_email or "").strip()
    configured_password = (email_settings.app_password or "").strip()

    sender_email = configured_sender or conf_settings.DEFAULT_SENDER_EMAIL
    return MailCredentials(
        sender_email=sender_email,
        username=configured_sender or conf_settings.GMAIL_USER or sender_email,
        password=configured_password or conf_settings.GMAIL_APP_PASSWORD,
    )


def get_mail_connection(credentials: MailCredentials):
    """Open a connection to the SMTP relay with the given credentials.

    Raises:
        ImproperlyConfigured: If the username or the app password is missing
    """
    if not credentials.username or not credentials.password:
        raise ImproperlyConfigured("Missing GMAIL_USER or GMAIL_APP_PASSWORD")

    return get_connection(
        host=conf_settings.EMAIL_SMTP_HOST,
        port=conf_settings.EMAIL_SMTP_PORT,
        username=credentials.username,
        password=credentials.password,
        use_ssl=True,
    )


def mail_error(subj, body, e=None):
    """Log a failed send and forward the details to the administrators.

    Args:
        subj (str): Subject of the email that failed
        body (str): Body of the email that failed
        e (Exception, optional): Exception that caused the failure
    """
    logger.error(f"Mail error: {e}")
    logger.error(f"Subject: {subj}")
    if e:
        body = f"{traceback.format_exc()}\n\n{subj}\n\n{body}"
    else:
        body = f"{subj}\n\n{body}"
    notify_admins("[Global Friendship] Mail error", body)


def notify_admins(subject: str, message_text: str, exception: Optional[Exception] = None) -> None:
    """Send a plain notification to every address in ``ADMINS``.

    Uses the default connection so that a broken relay configuration does not
    prevent the notification itself. Failures are logged and not raised.
    """
    if exception:
        message_text = f"{message_text}\n\n{traceback.format_exc()}"

    for _name, email in conf_settings.ADMINS:
        try:
            EmailMultiAlternatives(subject, message_text, conf_settings.DEFAULT_SENDER_EMAIL, [email]).send()
        except Exception as notify_exception:
            logger.error(f"Unable to notify admin {email}: {notify_exception}")


def send_portal_mail(
    subj: str,
    recipient: str,
    *,
    html: Optional[str] = None,
    text: Optional[str] = None,
    reply_to: Optional[str] = None,
    credentials: Optional[MailCredentials] = None,
) -> None:
    """Send an email through the portal relay.

    When only the HTML body is given the plain text alternative is derived from
    it; when only the text is given the message is sent as plain text.

    Args:
        subj: Email subject line
        recipient: Recipient email address
        html: HTML body
        text: Plain text body
        reply_to: Optional Reply-To address
        credentials: Sender credentials, resolved from the settings when omitted

    Raises:
        Exception: Re-raises sending exceptions after logging and notifying admins
    """
    body = text if text is not None else html_to_text(html or "")
    try:
        credentials = credentials or get_mail_credentials()
        headers = {}
        if reply_to:
            headers["Reply-To"] = reply_to

        email_message = EmailMultiAlternatives(
            subj,
            body,
            credentials.sender_email,
            [recipient],
            headers=headers,
            connection=get_mail_connection(credentials),
        )
        if html:
            email_message.attach_alternative(html, "text/html")
        email_message.send()

        logger.info(f"Sent email to: {recipient}")
        if conf_settings.DEBUG:
            logger.debug(f"Subject: {subj}")

    except Exception as email_sending_exception:
        mail_error(subj, body, email_sending_exception)
        raise email_sending_exception
