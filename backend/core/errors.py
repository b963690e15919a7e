"""Domain errors raised by the portal services.

Each error carries the HTTP status it maps to and a client-safe detail
message. ``backend.main`` turns them into JSON responses; nothing here
should ever include filesystem paths or database messages.
"""


class PortalError(Exception):
    """Base class for every error the portal reports to a client."""

    status_code = 500
    code = "internal_error"
    default_detail = "Internal server error."

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class InvalidCredentials(PortalError):
    status_code = 401
    code = "invalid_credentials"
    default_detail = "Invalid username or password."


class NotAuthenticated(PortalError):
    status_code = 401
    code = "not_authenticated"
    default_detail = "Login required."


class Forbidden(PortalError):
    status_code = 403
    code = "forbidden"
    default_detail = "You do not have access to this resource."


class NotFound(PortalError):
    status_code = 404
    code = "not_found"
    default_detail = "File not found."


class InvalidPartition(NotFound):
    code = "invalid_partition"
    default_detail = "Unknown grade level or subject."


class DuplicateUser(PortalError):
    status_code = 409
    code = "duplicate_user"
    default_detail = "Username is already taken."


class InvalidUpload(PortalError):
    status_code = 400
    code = "invalid_upload"
    default_detail = "Uploaded file is missing a file name."


class UploadTooLarge(PortalError):
    status_code = 413
    code = "upload_too_large"
    default_detail = "Uploaded file is too large."


class UnsupportedMediaType(PortalError):
    status_code = 415
    code = "unsupported_media_type"
    default_detail = "Only PDF files can be uploaded."


class StoreError(PortalError):
    status_code = 503
    code = "store_unavailable"
    default_detail = "Database unavailable. Try again later."


class NotificationError(PortalError):
    """Email delivery failed. Logged by the mailer, never sent to a client."""

    code = "notification_failed"
    default_detail = "Could not deliver notification."
