"""Postmark delivery receipt returned by the send-email endpoint."""

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_pascal

from sendout.exceptions import SendFailedError
from sendout.models import EmailDelivery


class PostmarkEmailResponse(BaseModel):
    """Receipt for an accepted message.

    Example payload::

        {
            "To": "receiver@example.com",
            "SubmittedAt": "2014-02-17T07:25:01.4178645-05:00",
            "MessageID": "0a129aee-e1cd-480d-b08d-4f48548ff48d",
            "ErrorCode": 0,
            "Message": "OK"
        }
    """

    model_config = ConfigDict(
        alias_generator=to_pascal,
        validate_by_alias=True,
        validate_by_name=True,
    )

    to: str
    submitted_at: str
    message_id: str = Field(..., alias="MessageID")
    error_code: int
    message: str

    @classmethod
    def from_http_response(cls, response: httpx.Response) -> "PostmarkEmailResponse":
        """Parse the receipt from an HTTP response body.

        Raises:
            SendFailedError: If the body is not JSON or misses a field.
        """
        try:
            return cls.model_validate_json(response.content)
        except ValidationError as err:
            raise SendFailedError(f"failed to parse response: {err}") from err

    def to_delivery(self) -> EmailDelivery:
        """Convert to the provider-agnostic delivery receipt."""
        return EmailDelivery(
            to=self.to,
            submitted_at=self.submitted_at,
            message_id=self.message_id,
            error_code=self.error_code,
            message=self.message,
        )
