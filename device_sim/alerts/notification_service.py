"""Servicio de notificaciones al técnico.

Canales:
- Email vía EmailJS (REST)
- WhatsApp vía Twilio (REST)

Un intento por canal. No bloquea si falla - solo loguea el error.
Un canal sin credenciales se omite con warning.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional

import requests

from common.config import Settings, get_settings

from ..domain.models import DeviceKind, DeviceState, metrics_as_dict
from .messages import describe_issue

logger = logging.getLogger(__name__)

EMAILJS_SEND_URL = "https://api.emailjs.com/api/v1.0/email/send"
TWILIO_MESSAGES_URL = "https://api.twilio.com/2010-04-01/Accounts/{sid}/Messages.json"


@dataclass(frozen=True)
class NotifierConfig:
    """Credenciales y destinatarios de los canales."""

    emailjs_service_id: str = ""
    emailjs_template_id: str = ""
    emailjs_public_key: str = ""
    technician_email: str = ""
    twilio_account_sid: str = ""
    twilio_auth_token: str = ""
    twilio_whatsapp_from: str = ""
    technician_whatsapp: str = ""
    timeout_seconds: float = 5.0

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "NotifierConfig":
        s = settings or get_settings()
        return cls(
            emailjs_service_id=s.emailjs_service_id,
            emailjs_template_id=s.emailjs_template_id,
            emailjs_public_key=s.emailjs_public_key,
            technician_email=s.technician_email,
            twilio_account_sid=s.twilio_account_sid,
            twilio_auth_token=s.twilio_auth_token,
            twilio_whatsapp_from=s.twilio_whatsapp_from,
            technician_whatsapp=s.technician_whatsapp,
            timeout_seconds=s.notify_timeout_seconds,
        )

    @property
    def email_configured(self) -> bool:
        return all((
            self.emailjs_service_id,
            self.emailjs_template_id,
            self.emailjs_public_key,
            self.technician_email,
        ))

    @property
    def whatsapp_configured(self) -> bool:
        return all((
            self.twilio_account_sid,
            self.twilio_auth_token,
            self.twilio_whatsapp_from,
            self.technician_whatsapp,
        ))


def build_email_params(kind: DeviceKind, state: DeviceState, to_email: str, sent_at: datetime) -> dict:
    device_name = DeviceKind(kind).display_name
    return {
        "to_email": to_email,
        "subject": f"Technician Alert: {device_name} Issue Detected",
        "device_type": device_name,
        "issue": describe_issue(kind, state.metrics),
        "timestamp": sent_at.strftime("%Y-%m-%d %H:%M:%S"),
        "metrics": json.dumps(metrics_as_dict(state.metrics), indent=2),
    }


def build_whatsapp_message(kind: DeviceKind, state: DeviceState, sent_at: datetime) -> str:
    device_name = DeviceKind(kind).display_name
    issue = describe_issue(kind, state.metrics)
    return (
        f"🚨 ALERT: {device_name} requires attention!\n\n"
        f"Issue: {issue}\n"
        f"Time: {sent_at.strftime('%Y-%m-%d %H:%M:%S')}\n\n"
        "Please check the system immediately."
    )


def _whatsapp_address(number: str) -> str:
    return number if number.startswith("whatsapp:") else f"whatsapp:{number}"


class TechnicianNotifier:
    """Envía la alerta de un dispositivo por todos los canales configurados."""

    def __init__(
        self,
        config: Optional[NotifierConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        self._config = config or NotifierConfig.from_settings()
        # Sin sesión inyectada se abre una requests.Session por envío:
        # el dispatcher llama a send() desde varios threads
        self._session = session

    def send(self, kind: DeviceKind, state: DeviceState) -> Dict[str, bool]:
        """Envía email + WhatsApp.

        Returns:
            {"email": ok, "whatsapp": ok} por canal
        """
        sent_at = state.last_updated
        if self._session is not None:
            return self._send_all(self._session, kind, state, sent_at)
        with requests.Session() as session:
            return self._send_all(session, kind, state, sent_at)

    def _send_all(
        self, session: requests.Session, kind: DeviceKind, state: DeviceState, sent_at: datetime
    ) -> Dict[str, bool]:
        return {
            "email": self._send_email(session, kind, state, sent_at),
            "whatsapp": self._send_whatsapp(session, kind, state, sent_at),
        }

    def _send_email(
        self, session: requests.Session, kind: DeviceKind, state: DeviceState, sent_at: datetime
    ) -> bool:
        cfg = self._config
        if not cfg.email_configured:
            logger.warning("[NOTIFY] EmailJS not configured - skipping email")
            return False

        try:
            response = session.post(
                EMAILJS_SEND_URL,
                json={
                    "service_id": cfg.emailjs_service_id,
                    "template_id": cfg.emailjs_template_id,
                    "user_id": cfg.emailjs_public_key,
                    "template_params": build_email_params(kind, state, cfg.technician_email, sent_at),
                },
                timeout=cfg.timeout_seconds,
            )
            if response.ok:
                logger.info("[NOTIFY] Email sent device=%s", state.id)
                return True
            logger.warning("[NOTIFY] Email failed: %s %s", response.status_code, response.text)
        except requests.RequestException as e:
            logger.error("[NOTIFY] Error sending email: %s", e)
        return False

    def _send_whatsapp(
        self, session: requests.Session, kind: DeviceKind, state: DeviceState, sent_at: datetime
    ) -> bool:
        cfg = self._config
        if not cfg.whatsapp_configured:
            logger.warning("[NOTIFY] Twilio not configured - skipping WhatsApp")
            return False

        try:
            response = session.post(
                TWILIO_MESSAGES_URL.format(sid=cfg.twilio_account_sid),
                data={
                    "Body": build_whatsapp_message(kind, state, sent_at),
                    "From": _whatsapp_address(cfg.twilio_whatsapp_from),
                    "To": _whatsapp_address(cfg.technician_whatsapp),
                },
                auth=(cfg.twilio_account_sid, cfg.twilio_auth_token),
                timeout=cfg.timeout_seconds,
            )
            if response.ok:
                logger.info("[NOTIFY] WhatsApp sent device=%s", state.id)
                return True
            logger.warning("[NOTIFY] WhatsApp failed: %s %s", response.status_code, response.text)
        except requests.RequestException as e:
            logger.error("[NOTIFY] Error sending WhatsApp: %s", e)
        return False
