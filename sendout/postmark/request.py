"""Postmark request body for the send-email endpoint.

Maps a provider-agnostic `EmailMessage` onto Postmark's PascalCase JSON:
recipient lists become comma-joined strings and the body is flattened into a
single ``TextBody`` or ``HtmlBody`` key.
"""

from typing import Annotated, Any, ClassVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    ValidationError,
    model_serializer,
    model_validator,
)
from pydantic.alias_generators import to_pascal

from sendout._base import ApiRequest
from sendout._http import HttpMethod
from sendout.exceptions import InvalidRecipientError, SendFailedError
from sendout.models import (
    RECIPIENT_FIELDS,
    Attachment,
    Body,
    EmailAddress,
    EmailMessage,
    Header,
    describe_errors,
)


# Postmark limits per message
MAX_RECIPIENTS = 50
MAX_TAG_LENGTH = 1000

CommaJoined = Annotated[
    list[EmailAddress],
    PlainSerializer(lambda addresses: ",".join(addresses), return_type=str),
]
PostmarkRecipients = Annotated[CommaJoined, Field(max_length=MAX_RECIPIENTS)]


class _PascalModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_pascal,
        validate_by_alias=True,
        validate_by_name=True,
    )


class PostmarkBody(_PascalModel):
    """Message body, sent as either ``TextBody`` or ``HtmlBody``."""

    text_body: str | None = None
    html_body: str | None = None

    @model_validator(mode="after")
    def _exactly_one(self) -> "PostmarkBody":
        if (self.text_body is None) == (self.html_body is None):
            raise ValueError("body must be either TextBody or HtmlBody")
        return self

    @classmethod
    def from_body(cls, body: Body) -> "PostmarkBody":
        if body.is_html:
            return cls(html_body=body.html)
        return cls(text_body=body.text)

    @model_serializer
    def _tagged(self) -> dict[str, str]:
        if self.html_body is not None:
            return {"HtmlBody": self.html_body}
        return {"TextBody": self.text_body}  # type: ignore[dict-item]


class PostmarkHeader(_PascalModel):
    name: str
    value: str

    @classmethod
    def from_header(cls, header: Header) -> "PostmarkHeader":
        return cls(name=header.name, value=header.value)


class PostmarkAttachment(_PascalModel):
    name: str
    content: str
    content_type: str

    @classmethod
    def from_attachment(cls, attachment: Attachment) -> "PostmarkAttachment":
        return cls(
            name=attachment.name,
            content=attachment.content,
            content_type=attachment.content_type,
        )


class PostmarkEmailRequest(ApiRequest, _PascalModel):
    """Request body for ``POST /email``.

    Attributes:
        from_: Sender address, a confirmed sender signature (``From``).
        to: Recipients, 1 to 50 addresses (``To``).
        subject: Subject line.
        body: Text or HTML body, flattened into ``TextBody``/``HtmlBody``.
        cc: Up to 50 carbon-copy recipients.
        bcc: Up to 50 blind carbon-copy recipients.
        tag: Email tag, at most 1000 characters.
        reply_to: Reply-to override.
        headers: Custom headers.
        metadata: Custom metadata key/value pairs.
        attachments: File attachments.
        message_stream: Message stream id; Postmark uses ``outbound`` when
            omitted.
    """

    METHOD: ClassVar[HttpMethod] = "POST"
    ENDPOINT: ClassVar[str] = "/email"

    from_: EmailAddress = Field(..., alias="From")
    to: Annotated[PostmarkRecipients, Field(min_length=1)]
    subject: str
    body: PostmarkBody
    cc: PostmarkRecipients | None = None
    bcc: PostmarkRecipients | None = None
    tag: Annotated[str, Field(max_length=MAX_TAG_LENGTH)] | None = None
    reply_to: CommaJoined | None = None
    headers: list[PostmarkHeader] | None = None
    metadata: dict[str, str] | None = None
    attachments: list[PostmarkAttachment] | None = None
    message_stream: str | None = None

    @model_serializer(mode="wrap")
    def _flatten_body(self, handler: Any) -> dict[str, Any]:
        data = handler(self)
        body = data.pop("Body", None)
        if body is None:
            body = data.pop("body", None)
        if isinstance(body, dict):
            data.update(body)
        return data

    @classmethod
    def from_message(
        cls,
        message: EmailMessage,
        default_from: str | None = None,
    ) -> "PostmarkEmailRequest":
        """Build the Postmark request for an email message.

        Args:
            message: The message to send.
            default_from: Sender used when the message does not set one.

        Returns:
            The request, validated against Postmark's limits.

        Raises:
            InvalidRecipientError: If a recipient list is empty, too long, or
                holds an invalid address.
            SendFailedError: If any other field violates Postmark's limits.
        """
        try:
            return cls(
                from_=message.from_ or default_from,
                to=message.to.addresses,
                subject=message.subject,
                body=PostmarkBody.from_body(message.body),
                cc=message.cc.addresses if message.cc else None,
                bcc=message.bcc.addresses if message.bcc else None,
                tag=message.tag,
                reply_to=message.reply_to.addresses if message.reply_to else None,
                headers=(
                    [PostmarkHeader.from_header(h) for h in message.headers]
                    if message.headers is not None
                    else None
                ),
                metadata=message.metadata,
                attachments=(
                    [PostmarkAttachment.from_attachment(a) for a in message.attachments]
                    if message.attachments is not None
                    else None
                ),
                message_stream=message.message_stream,
            )
        except ValidationError as err:
            errors = err.errors()
            if any(error["loc"] and error["loc"][0] in RECIPIENT_FIELDS for error in errors):
                raise InvalidRecipientError(describe_errors(errors)) from err
            raise SendFailedError(f"invalid email request: {describe_errors(errors)}") from err

