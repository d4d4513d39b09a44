"""In-memory push channel. Keeps every delivery so callers can inspect them."""

from dataclasses import dataclass, field
from itertools import count

from notifications.channel import DeliveryReceipt, PushChannel


@dataclass(frozen=True)
class PushDelivery:
    reference: str
    recipient: str
    heading: str
    text: str
    payload: dict = field(default_factory=dict)


class RecordingPushChannel(PushChannel):
    def __init__(self):
        self.deliveries: list[PushDelivery] = []
        self._refusal: str | None = None
        self._sequence = count(1)

    def refuse(self, reason: str = "Device unreachable") -> None:
        """Fail every following delivery with ``reason``."""
        self._refusal = reason

    def deliver(self, recipient: str, heading: str, text: str, payload: dict | None = None) -> DeliveryReceipt:
        if self._refusal is not None:
            return DeliveryReceipt(delivered=False, error=self._refusal)

        delivery = PushDelivery(
            reference=f"push-{next(self._sequence)}",
            recipient=recipient,
            heading=heading,
            text=text,
            payload=dict(payload or {}),
        )
        self.deliveries.append(delivery)
        return DeliveryReceipt(delivered=True, reference=delivery.reference)

    def delivered_to(self, recipient: str) -> list[PushDelivery]:
        return [d for d in self.deliveries if d.recipient == recipient]
