"""Core email types: messages, recipients, attachments and delivery receipts.

These models are provider-agnostic. Provider modules (see `sendout.postmark`)
map them onto their own wire format and map the provider's receipt back onto
`EmailDelivery`.

Generic serialization uses snake_case keys, omits unset optional fields,
flattens the body into a single ``Text`` or ``Html`` key and joins recipient
lists with commas::

    message.model_dump(mode="json", by_alias=True, exclude_none=True)
"""

import base64
import mimetypes
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any, Iterator

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    RootModel,
    ValidationError,
    model_serializer,
    model_validator,
)
from pydantic.networks import validate_email

from sendout.exceptions import InvalidRecipientError, SendFailedError

if TYPE_CHECKING:
    import httpx


DEFAULT_CONTENT_TYPE = "application/octet-stream"

NonEmptyStr = Annotated[str, Field(min_length=1)]

# Fields holding recipient lists, by name and by alias
RECIPIENT_FIELDS = frozenset({"to", "cc", "bcc", "reply_to", "To", "Cc", "Bcc", "ReplyTo"})


def _check_address(value: str) -> str:
    """Validate an address, keeping an optional display name as given.

    Accepts both ``support@acme.com`` and ``Acme Support <support@acme.com>``.
    """
    validate_email(value)
    return value.strip()


EmailAddress = Annotated[str, AfterValidator(_check_address)]


def describe_errors(errors: list[Any]) -> str:
    """Render pydantic validation errors as ``loc: msg`` pairs."""
    return "; ".join(
        f"{'.'.join(str(loc) for loc in error['loc'])}: {error['msg']}" for error in errors
    )


class Recipients(RootModel[list[EmailAddress]]):
    """Ordered list of recipient email addresses.

    Must contain at least one valid address. Accepts a list of addresses, a
    single address, or a comma-separated string. Serializes back to a single
    comma-joined string.

    Example:
        >>> Recipients(["a@example.com", "b@example.com"]).model_dump()
        'a@example.com,b@example.com'
    """

    root: Annotated[list[EmailAddress], Field(min_length=1)]

    @model_validator(mode="before")
    @classmethod
    def _split_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return [part.strip() for part in data.split(",") if part.strip()]
        if isinstance(data, tuple):
            return list(data)
        return data

    @model_serializer
    def _join(self) -> str:
        return ",".join(self.root)

    @property
    def addresses(self) -> list[str]:
        """The addresses as a plain list."""
        return list(self.root)

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, index: int) -> str:
        return self.root[index]


class Body(BaseModel):
    """Email body content, either plain text or HTML but never both.

    Attributes:
        text: Plain text content.
        html: HTML content.
    """

    text: str | None = None
    html: str | None = None

    @model_validator(mode="after")
    def _exactly_one(self) -> "Body":
        if (self.text is None) == (self.html is None):
            raise ValueError("body must be either text or html, not both or neither")
        return self

    @classmethod
    def text_body(cls, text: str) -> "Body":
        """Build a plain text body."""
        return cls(text=text)

    @classmethod
    def html_body(cls, html: str) -> "Body":
        """Build an HTML body."""
        return cls(html=html)

    @property
    def is_html(self) -> bool:
        return self.html is not None

    @property
    def content(self) -> str:
        """The body content regardless of its kind."""
        return self.html if self.html is not None else self.text  # type: ignore[return-value]

    @model_serializer
    def _tagged(self) -> dict[str, str]:
        if self.html is not None:
            return {"Html": self.html}
        return {"Text": self.text}  # type: ignore[dict-item]


class Header(BaseModel):
    """Custom email header.

    Attributes:
        name: Header name (e.g. ``X-Campaign-Id``).
        value: Header value.
    """

    name: NonEmptyStr
    value: NonEmptyStr


class Attachment(BaseModel):
    """File attached to an email.

    Attributes:
        name: Attachment filename.
        content: Base64-encoded file content.
        content_type: MIME type of the file.
    """

    name: str
    content: str
    content_type: str

    @classmethod
    def from_bytes(cls, name: str, data: bytes, content_type: str) -> "Attachment":
        """Build an attachment from raw bytes, base64 encoding them."""
        return cls(
            name=name,
            content=base64.b64encode(data).decode("ascii"),
            content_type=content_type,
        )

    @classmethod
    def from_path(cls, path: str | Path, content_type: str | None = None) -> "Attachment":
        """Build an attachment from a file on disk.

        Args:
            path: Path of the file to attach. Its basename becomes the
                attachment name.
            content_type: MIME type; guessed from the file extension when
                omitted, falling back to ``application/octet-stream``.
        """
        path = Path(path)
        if content_type is None:
            content_type = mimetypes.guess_type(path.name)[0] or DEFAULT_CONTENT_TYPE
        return cls.from_bytes(path.name, path.read_bytes(), content_type)


class EmailMessage(BaseModel):
    """An email message to send.

    Addresses may carry a display name (``Acme Support <support@acme.com>``),
    which is kept as given. A malformed or empty recipient list raises
    `InvalidRecipientError`; other invalid fields raise pydantic's
    ``ValidationError``.

    Attributes:
        from_: Sender email address (serialized as ``from``). When omitted the
            client falls back to the configured verified sender.
        to: Primary recipients.
        subject: Email subject line.
        body: Text or HTML body.
        cc: Carbon-copy recipients.
        bcc: Blind carbon-copy recipients.
        tag: Tag used to categorize outgoing email.
        reply_to: Reply-to addresses.
        headers: Custom headers.
        metadata: Custom key/value metadata attached to the message.
        attachments: File attachments.
        message_stream: Provider stream to send through (e.g. ``outbound``).
    """

    model_config = ConfigDict(validate_by_alias=True, validate_by_name=True)

    from_: EmailAddress | None = Field(None, alias="from")
    to: Recipients
    subject: str
    body: Body
    cc: Recipients | None = None
    bcc: Recipients | None = None
    tag: NonEmptyStr | None = None
    reply_to: Recipients | None = None
    headers: Annotated[list[Header], Field(min_length=1)] | None = None
    metadata: Annotated[dict[str, str], Field(min_length=1)] | None = None
    attachments: list[Attachment] | None = None
    message_stream: NonEmptyStr | None = None

    @model_validator(mode="wrap")
    @classmethod
    def _recipient_errors(cls, data: Any, handler: Any) -> "EmailMessage":
        try:
            return handler(data)
        except ValidationError as err:
            rejected = [
                error
                for error in err.errors()
                if error["loc"] and error["loc"][0] in RECIPIENT_FIELDS
            ]
            if rejected:
                raise InvalidRecipientError(describe_errors(rejected)) from err
            raise

    @model_serializer(mode="wrap")
    def _flatten_body(self, handler: Any) -> dict[str, Any]:
        data = handler(self)
        body = data.pop("body", None)
        if isinstance(body, dict):
            data.update(body)
        return data


class EmailDelivery(BaseModel):
    """Delivery receipt confirming the provider accepted a message.

    Attributes:
        to: Recipient(s) the message was submitted for.
        submitted_at: Submission timestamp as reported by the provider.
        message_id: Provider message identifier.
        error_code: Provider error code, 0 on success.
        message: Human-readable status message.
    """

    to: str
    submitted_at: str
    message_id: str
    error_code: int
    message: str

    @classmethod
    def from_http_response(cls, response: "httpx.Response") -> "EmailDelivery":
        """Parse a delivery receipt from an HTTP response body.

        Raises:
            SendFailedError: If the body is not a valid receipt.
        """
        try:
            return cls.model_validate_json(response.content)
        except ValidationError as err:
            raise SendFailedError(f"failed to parse response: {err}") from err
