from typing import Dict, Any
import logging
import requests

from app.config import settings
from app.exceptions import ExternalServiceError

logger = logging.getLogger("dogoods.sms")


def _messages_url() -> str:
    return (
        f"{settings.twilio_api_base.rstrip('/')}/Accounts/"
        f"{settings.twilio_account_sid}/Messages.json"
    )


def send_message(to: str, body: str) -> Dict[str, Any]:
    """Send one SMS through Twilio's Messages API.

    Args:
        to: E.164 formatted recipient number
        body: message text

    Returns:
        Dict with the Twilio message ``sid`` and ``status``

    Raises:
        ExternalServiceError: credentials missing, network failure or a
            non-2xx response from Twilio
    """
    if not settings.twilio_configured():
        raise ExternalServiceError("Twilio credentials not configured")

    data = {"To": to, "From": settings.twilio_phone_number, "Body": body}

    try:
        response = requests.post(
            _messages_url(),
            data=data,
            auth=(settings.twilio_account_sid, settings.twilio_auth_token),
            timeout=settings.twilio_timeout_sec,
        )
    except requests.RequestException as exc:
        logger.warning("Twilio request failed: %s", exc)
        raise ExternalServiceError(f"Twilio request failed: {exc}") from exc

    if response.status_code >= 400:
        try:
            detail = response.json().get("message") or response.reason
        except ValueError:
            detail = response.reason
        raise ExternalServiceError(
            f"Twilio API error: {detail}",
            details={"status_code": response.status_code},
        )

    result = response.json()
    return {"sid": result.get("sid"), "status": result.get("status")}
