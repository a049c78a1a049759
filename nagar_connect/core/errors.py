from __future__ import annotations

from typing import Any, Dict, List


class NagarError(Exception):
    """Base for every error that reaches the HTTP layer as a JSON body."""

    status_code = 500
    default_message = "An unknown error occurred"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        return {"success": False, "error": self.message}


# -------------------------
# Auth / access
# -------------------------
class Unauthorized(NagarError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(NagarError):
    status_code = 403
    default_message = "Forbidden"


class Conflict(NagarError):
    status_code = 400
    default_message = "Already exists"


class NotFound(NagarError):
    status_code = 404
    default_message = "Not found"


# -------------------------
# Submission validation
# -------------------------
class ValidationFailed(NagarError):
    status_code = 400
    default_message = "Invalid request"


class MissingFields(ValidationFailed):
    def __init__(self, fields: List[str]):
        self.fields = list(fields)
        super().__init__(f"Missing required fields ({', '.join(self.fields)})")

    def to_body(self) -> Dict[str, Any]:
        body = super().to_body()
        body["missing"] = self.fields
        return body


class FieldTooLong(ValidationFailed):
    def __init__(self, field: str, limit: int):
        self.field = field
        self.limit = limit
        super().__init__(f"{field} cannot exceed {limit} characters")


class TooManyAttachments(ValidationFailed):
    def __init__(self, limit: int):
        self.limit = limit
        super().__init__(f"At most {limit} attachments are allowed per issue")


# -------------------------
# Geocoding
# -------------------------
class InvalidAddress(ValidationFailed):
    default_message = "Address is required"


class GeocodeNotFound(NagarError):
    status_code = 400
    default_message = "No results for the provided location"


class GeocodeServiceError(NagarError):
    status_code = 502
    default_message = "Geocoding service error"


class GeocodeFailed(ValidationFailed):
    default_message = "Failed to geocode address"


class AddressNotFound(ValidationFailed):
    default_message = "Could not find coordinates for the provided address"


class InvalidCoordinates(ValidationFailed):
    default_message = "Invalid coordinates received from geocoding service"


# -------------------------
# Media
# -------------------------
class UnsupportedMediaType(ValidationFailed):
    default_message = "File type not allowed"


class FileTooLarge(ValidationFailed):
    default_message = "File too large. Maximum size is 10MB"


class StorageServiceError(NagarError):
    status_code = 500
    default_message = "Upload failed"


# -------------------------
# Infrastructure
# -------------------------
class PersistenceError(NagarError):
    status_code = 500


class Misconfigured(NagarError):
    status_code = 500

    def __init__(self, keys: List[str]):
        self.keys = list(keys)
        super().__init__(f"Missing configuration: {', '.join(self.keys)}")
