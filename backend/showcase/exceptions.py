"""
Showcase API: Custom Exception Hierarchy
===========================================

What:  Application-specific exceptions for the failures this service knows about.
How:   Each exception carries a message and an optional context dict.
       Route handlers catch them (together with any driver error) at their
       boundary and answer with the failure envelope:

           HTTP 200  {"success": false, "error": "<message>"}

Who:   Raised by the store client, the file intake and the mailer.

Exception Hierarchy:
    ShowcaseError (base)
    ├── StoreUnavailableError   store never connected; fail fast
    ├── FileStorageError        writing an upload to disk failed
    ├── UploadError             multipart payload broke the one-file rule
    └── MailDeliveryError       relay refused or could not be reached

Driver errors (bson InvalidId, pymongo errors) are not wrapped: the failure
envelope carries their text verbatim.
"""

from typing import Any, Dict, Optional


class ShowcaseError(Exception):
    """
    Base exception for all Showcase application errors.

    Attributes:
        message:  Error description, returned as the envelope's `error` text
        context:  Additional debug info (logged, never returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class StoreUnavailableError(ShowcaseError):
    """
    Raised when a store operation is attempted but the client never connected.

    What:    The startup connection to MongoDB failed (or has not run yet).
    When:    Any CRUD request while `Store.is_ready` is False.

    Requests fail immediately with this error instead of waiting on a
    server-selection timeout. The process keeps running; a restart with a
    reachable store is required to recover.
    """

    def __init__(
        self,
        message: str = "Database not connected",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(ShowcaseError):
    """
    Raised when writing an uploaded file to the uploads directory fails.

    When:    Disk full, permission denied, directory removed at runtime.
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UploadError(ShowcaseError):
    """
    Raised when a multipart write carries a file the intake does not accept.

    Only one file, under the `image` field, is allowed per request. Anything
    else is rejected with the message "Unexpected field".
    """

    def __init__(
        self,
        message: str = "Unexpected field",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class MailDeliveryError(ShowcaseError):
    """
    Raised when the mail relay rejects a message or cannot be reached.

    The message is the relay's (or socket's) own error text. No retry is
    attempted; the caller reports the failure and moves on.
    """

    def __init__(
        self,
        message: str = "Mail delivery failed",
        recipient: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if recipient:
            ctx["recipient"] = recipient
        super().__init__(message=message, context=ctx)
        self.recipient = recipient
