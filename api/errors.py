class ImageServiceError(Exception):
    """Base for every failure the API reports with a stable error kind."""

    kind = "InternalError"
    status_code = 500
    public_error = "Internal server error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequest(ImageServiceError):
    kind = "InvalidRequest"
    status_code = 400


class UnsupportedMediaType(ImageServiceError):
    kind = "UnsupportedMediaType"
    status_code = 400


class PayloadTooLarge(ImageServiceError):
    kind = "PayloadTooLarge"
    status_code = 400


class InternalError(ImageServiceError):
    pass


class CredentialIssuanceFailed(InternalError):
    kind = "CredentialIssuanceFailed"


class PersistFailed(InternalError):
    kind = "PersistFailed"


class ListFailed(InternalError):
    kind = "ListFailed"
    public_error = "Failed to fetch images"
