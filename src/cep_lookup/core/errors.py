from __future__ import annotations


class CepError(Exception):
    """Base error for cep-lookup."""


class ValidationError(CepError):
    """Raised when a postal code is not 8 digits."""


class NotFoundError(CepError):
    """Raised when the upstream API has no address for the postal code."""


class UpstreamError(CepError):
    """Raised when an upstream API fails."""


class ServiceError(UpstreamError):
    """Raised when the upstream API answers with an unexpected status."""

    def __init__(self, message: str, *, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class TransportError(UpstreamError):
    """Raised when the upstream API cannot be reached at all."""
