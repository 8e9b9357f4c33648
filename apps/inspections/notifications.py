"""
User-facing success/error notifications.

Fire-and-forget: a notification is queued on the request's message storage
when one is available and always logged. Nothing here raises.
"""

import logging

from django.contrib import messages

logger = logging.getLogger(__name__)


def _format(title, description):
    return f"{title}: {description}" if description else title


def notify_success(request, title, description=''):
    text = _format(title, description)
    logger.info("Notification: %s", text)
    if request is not None:
        messages.success(request, text, fail_silently=True)


def notify_error(request, title, description=''):
    text = _format(title, description)
    logger.warning("Error notification: %s", text)
    if request is not None:
        messages.error(request, text, fail_silently=True)
