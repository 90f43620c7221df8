"""
Push notification dispatch through the hosted send-notification function.
Delivery is fire-and-forget: an HTTP 2xx acknowledgement is all we wait for.
"""
import logging

import httpx
from django.conf import settings

from .models import FcmToken

logger = logging.getLogger(__name__)


class PushDeliveryError(Exception):
    """The push function rejected the request or could not be reached."""


def send_push(title, body, type='general', tokens=None) -> dict:
    """
    POST {title, body, type, tokens} to PUSH_ENDPOINT_URL.
    tokens=None targets every registered device.
    """
    if not settings.PUSH_ENDPOINT_URL:
        raise PushDeliveryError('PUSH_ENDPOINT_URL is not configured')
    if tokens is None:
        tokens = list(FcmToken.objects.values_list('token', flat=True).distinct())

    try:
        response = httpx.post(
            settings.PUSH_ENDPOINT_URL,
            json={'title': title, 'body': body, 'type': type, 'tokens': tokens},
            headers={'Authorization': f'Bearer {settings.PUSH_API_KEY}'},
            timeout=settings.PUSH_TIMEOUT_SECONDS,
        )
    except httpx.HTTPError as exc:
        logger.warning(f"[push] request failed: {exc}")
        raise PushDeliveryError(str(exc)) from exc

    if not response.is_success:
        try:
            error = response.json().get('error') or 'Failed to send notification'
        except ValueError:
            error = 'Failed to send notification'
        logger.warning(f"[push] rejected status={response.status_code} error={error}")
        raise PushDeliveryError(error)

    logger.info(f"[push] sent type={type} tokens={len(tokens)}")
    try:
        return response.json()
    except ValueError:
        return {}


def register_token(user, token, device_info='') -> FcmToken:
    fcm_token, _ = FcmToken.objects.update_or_create(
        user=user,
        token=token,
        defaults={'device_info': (device_info or '')[:200]},
    )
    return fcm_token
