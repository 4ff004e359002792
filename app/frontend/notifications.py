from dataclasses import dataclass
from typing import Literal, Optional

Variant = Literal["success", "error"]


@dataclass(frozen=True)
class Notification:
    message: str
    variant: Variant


class NotificationMixin:
    """One dismissible notification at a time, newest replaces the last."""

    notification: Optional[Notification] = None

    def notify(self, message: str, variant: Variant) -> Notification:
        self.notification = Notification(message=message, variant=variant)
        return self.notification

    def dismiss_notification(self) -> None:
        self.notification = None
