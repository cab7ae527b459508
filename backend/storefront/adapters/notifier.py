import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Set, Tuple

import requests

log = logging.getLogger("notifier")


class NotifierError(Exception):
    """Raised when an email could not be handed to the delivery service."""


class Notifier(ABC):
    @abstractmethod
    def send(self, template_id: str, recipient: str, params: Dict) -> bool:
        ...

    def health_check(self) -> bool:
        return True


class EmailJsNotifier(Notifier):
    """
    Sends template emails through the EmailJS REST API.
    Template params always carry ``to_email`` so templates can address it.
    """

    def __init__(
        self,
        service_id: str,
        public_key: Optional[str],
        api_url: str = "https://api.emailjs.com/api/v1.0/email/send",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.service_id = service_id
        self.public_key = public_key
        self.api_url = api_url
        self.timeout = timeout
        self.http = session or requests.Session()

    def send(self, template_id: str, recipient: str, params: Dict) -> bool:
        payload = {
            "service_id": self.service_id,
            "template_id": template_id,
            "user_id": self.public_key,
            "template_params": {**params, "to_email": recipient},
        }
        try:
            r = self.http.post(self.api_url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise NotifierError(f"EmailJS request failed: {e}") from e
        if not r.ok:
            raise NotifierError(f"EmailJS rejected email: {r.status_code} {r.text}")
        return True

    def health_check(self) -> bool:
        return bool(self.service_id and self.public_key)


class MockNotifier(Notifier):
    """
    Records emails instead of sending them. Templates listed in
    ``fail_templates`` raise NotifierError, for exercising failure paths.
    """

    def __init__(self, fail_templates: Optional[Set[str]] = None):
        self.sent: List[Tuple[str, str, Dict]] = []
        self.fail_templates = set(fail_templates or ())

    def send(self, template_id: str, recipient: str, params: Dict) -> bool:
        if template_id in self.fail_templates:
            raise NotifierError(f"Simulated failure for template {template_id}")
        self.sent.append((template_id, recipient, dict(params)))
        log.info("mock email template=%s to=%s", template_id, recipient)
        return True


def build_notifier(settings) -> Notifier:
    if settings.EMAILJS_SERVICE_ID:
        return EmailJsNotifier(
            settings.EMAILJS_SERVICE_ID,
            settings.EMAILJS_PUBLIC_KEY,
            api_url=settings.EMAILJS_API_URL,
            timeout=settings.NOTIFY_TIMEOUT_SECONDS,
        )
    log.info("EMAILJS_SERVICE_ID not set; emails are only logged")
    return MockNotifier()
