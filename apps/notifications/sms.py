"""SMS delivery backends.

The backend is chosen with the ``SMS_BACKEND`` setting, mirroring how Django
selects an email backend. Production uses Twilio, development prints to the
console and the test suite collects messages in :data:`outbox`.
"""

from __future__ import annotations

import logging
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass

from django.conf import settings  # type: ignore
from django.utils.module_loading import import_string  # type: ignore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SMSMessage:
    to: str
    body: str


# Messages collected by LocmemSMSBackend
outbox: list[SMSMessage] = []


class BaseSMSBackend(ABC):
    @abstractmethod
    def send(self, to: str, body: str) -> None:
        """Deliver ``body`` to ``to`` or raise."""


class TwilioSMSBackend(BaseSMSBackend):
    def __init__(self) -> None:
        from twilio.http.http_client import TwilioHttpClient  # type: ignore
        from twilio.rest import Client  # type: ignore

        self.client = Client(
            settings.TWILIO_ACCOUNT_SID,
            settings.TWILIO_AUTH_TOKEN,
            http_client=TwilioHttpClient(timeout=settings.SMS_TIMEOUT),
        )
        self.from_number = settings.TWILIO_PHONE_NUMBER

    def send(self, to: str, body: str) -> None:
        message = self.client.messages.create(body=body, from_=self.from_number, to=to)
        logger.debug("Twilio accepted message %s", message.sid)


class ConsoleSMSBackend(BaseSMSBackend):
    def __init__(self, stream=None) -> None:
        self.stream = stream or sys.stdout

    def send(self, to: str, body: str) -> None:
        self.stream.write(f"SMS to {to}: {body}\n")
        self.stream.flush()


class LocmemSMSBackend(BaseSMSBackend):
    def send(self, to: str, body: str) -> None:
        outbox.append(SMSMessage(to=to, body=body))


def get_sms_backend(path: str | None = None) -> BaseSMSBackend:
    return import_string(path or settings.SMS_BACKEND)()
