import logging
from typing import List

import httpx

from ..core.config import settings
from ..models.alert import Alert

logger = logging.getLogger(__name__)

WS_CLIENTS = set()


async def broadcast(message: dict):
    dead = []
    for ws in list(WS_CLIENTS):
        try: await ws.send_json(message)
        except Exception: dead.append(ws)
    for d in dead: WS_CLIENTS.discard(d)


def alert_payload(alert: Alert) -> dict:
    return {
        "id": alert.id,
        "location": alert.location_id,
        "parameter": alert.parameter,
        "value": alert.value,
        "status": alert.status,
        "severity": alert.severity,
        "safe_min": alert.safe_min,
        "safe_max": alert.safe_max,
        "timestamp": alert.timestamp.isoformat(),
    }


class AlertNotifier:
    """Logs and queues new alerts; flush() sends them to websocket clients and the webhook."""

    def __init__(self, webhook_url: str = "", webhook_token: str = "", timeout: float = 8.0):
        self.webhook_url = webhook_url.strip()
        self.webhook_token = webhook_token.strip()
        self.timeout = timeout
        self.pending: List[dict] = []

    @classmethod
    def from_settings(cls) -> "AlertNotifier":
        return cls(
            webhook_url=settings.NOTIFY_WEBHOOK_URL,
            webhook_token=settings.NOTIFY_WEBHOOK_TOKEN or "",
            timeout=float(settings.EXTERNAL_TIMEOUT_SECONDS) if settings.EXTERNAL_TIMEOUT_SECONDS else 8.0,
        )

    def __call__(self, alert: Alert):
        logger.warning(
            "ALERT location=%s parameter=%s value=%s status=%s severity=%s",
            alert.location_id, alert.parameter, alert.value, alert.status, alert.severity,
        )
        self.pending.append(alert_payload(alert))

    async def flush(self) -> int:
        pending, self.pending = self.pending, []
        for payload in pending:
            await broadcast({"type": "alert", "data": payload})
        if pending and self.webhook_url:
            await self._post_webhook(pending)
        return len(pending)

    async def _post_webhook(self, payloads: List[dict]):
        headers = {"Content-Type": "application/json"}
        if self.webhook_token:
            headers["Authorization"] = f"Bearer {self.webhook_token}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                for payload in payloads:
                    await client.post(self.webhook_url, json=payload, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error("Alert webhook delivery failed: %s", exc)
