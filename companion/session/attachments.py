"""Pending image attachment awaiting send."""

import logging

from pydantic import BaseModel, ConfigDict

from companion.models.schemas import ImagePayload

logger = logging.getLogger(__name__)


class PendingAttachment(BaseModel):
    """An image the user attached but has not sent yet.

    Attributes:
        filename: Cache filename the image was stored under.
        data: Base64 encoded image bytes.
    """

    model_config = ConfigDict(frozen=True)

    filename: str
    data: str

    def to_payload(self) -> ImagePayload:
        return ImagePayload(filename=self.filename, data=self.data)


class AttachmentManager:
    """Holds at most one pending attachment."""

    def __init__(self) -> None:
        self._pending: PendingAttachment | None = None

    @property
    def pending(self) -> PendingAttachment | None:
        return self._pending

    def attach(self, filename: str, data: str) -> PendingAttachment:
        """Set the pending attachment, replacing any existing one."""
        if self._pending is not None:
            logger.debug(f"Replacing pending attachment {self._pending.filename}")
        self._pending = PendingAttachment(filename=filename, data=data)
        return self._pending

    def peek_for_send(self) -> PendingAttachment | None:
        return self._pending

    def consume(self) -> PendingAttachment | None:
        """Take the pending attachment for sending, leaving none behind."""
        attachment, self._pending = self._pending, None
        return attachment

    def restore(self, attachment: PendingAttachment) -> None:
        """Put back an attachment whose send failed."""
        self._pending = attachment

    def clear(self) -> None:
        self._pending = None
