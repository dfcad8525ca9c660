# geopost/errors.py
"""
Error taxonomy shared by services and routers.

Services raise these; routers turn each one into a single HTTPException.
"""


class GeopostError(Exception):
    """Base class. `detail` is the user-facing message."""

    detail = "internal_error"

    def __init__(self, detail: str | None = None):
        if detail is not None:
            self.detail = detail
        super().__init__(self.detail)


# --- 4xx ---------------------------------------------------------------------
class ClientInputError(GeopostError):
    detail = "Invalid request"

class InvalidCredentialsFormat(ClientInputError):
    detail = "Invalid username or password"

class AlreadyExists(ClientInputError):
    detail = "User already exists."

class MissingMedia(ClientInputError):
    detail = "Image is not available"


# --- 401 ---------------------------------------------------------------------
class AuthError(GeopostError):
    detail = "not_authenticated"

class WrongCredentials(AuthError):
    detail = "Wrong username or password"

class InvalidToken(AuthError):
    detail = "invalid_token"

class TokenExpired(AuthError):
    detail = "token_expired"


# --- 5xx ---------------------------------------------------------------------
class CollaboratorUnavailable(GeopostError):
    detail = "Service unavailable"

class StoreUnavailable(CollaboratorUnavailable):
    detail = "Failed to read from user store"

class AnalysisFailed(CollaboratorUnavailable):
    detail = "Failed to annotate the image"

class BlobStoreFailed(CollaboratorUnavailable):
    detail = "Failed to save image to blob storage"

class IndexWriteFailed(CollaboratorUnavailable):
    detail = "Failed to save post to index"

class SearchFailed(CollaboratorUnavailable):
    detail = "Failed to read post from index"

class LedgerFailed(CollaboratorUnavailable):
    detail = "Failed to write post to ledger"


# --- startup -----------------------------------------------------------------
class BootstrapFailure(GeopostError):
    detail = "Index bootstrap failed"
