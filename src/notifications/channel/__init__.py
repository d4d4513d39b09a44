"""Push channel: where notifications leave the platform.

``get_channel`` returns the registered channel, defaulting to the in-memory
``RecordingPushChannel``. A real provider is plugged in at startup with
``register_channel``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class DeliveryReceipt:
    delivered: bool
    reference: str | None = None
    error: str | None = None


class PushChannel(ABC):
    @abstractmethod
    def deliver(self, recipient: str, heading: str, text: str, payload: dict | None = None) -> DeliveryReceipt:
        """Push one message to ``recipient``'s devices."""


_channel: PushChannel | None = None


def get_channel() -> PushChannel:
    global _channel
    if _channel is None:
        from notifications.channel.recording import RecordingPushChannel

        _channel = RecordingPushChannel()
    return _channel


def register_channel(channel: PushChannel) -> None:
    global _channel
    _channel = channel


def reset_channels() -> None:
    global _channel
    _channel = None
