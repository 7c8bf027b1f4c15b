"""Postmark provider: wire request, receipt, and clients."""

from sendout.postmark.client import AsyncPostmarkClient, PostmarkClient
from sendout.postmark.request import (
    PostmarkAttachment,
    PostmarkBody,
    PostmarkEmailRequest,
    PostmarkHeader,
)
from sendout.postmark.response import PostmarkEmailResponse

__all__ = [
    "PostmarkClient",
    "AsyncPostmarkClient",
    "PostmarkEmailRequest",
    "PostmarkBody",
    "PostmarkHeader",
    "PostmarkAttachment",
    "PostmarkEmailResponse",
]
