"""
Error categories for credential operations
==========================================

Every failure of a credential store, registry or broker operation is raised
as one of the categories below. They all derive from ``ValueError`` so that
route handlers can treat them like any other rejected request and answer
with HTTP 400 and the error message.

Categories:
- NotFoundError: a referenced app, temporary token or user credential is absent
- ConflictError: creation of a unique key that already exists
- CredentialValidationError: input or stored data fails schema constraints
- UpstreamError: the key-value store or the Twitter API call failed
"""


class CredentialError(ValueError):
    """Base class for all categorized credential errors."""

    code = "credential_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(CredentialError):
    code = "not_found"


class ConflictError(CredentialError):
    code = "conflict"


class CredentialValidationError(CredentialError):
    code = "validation_error"


class UpstreamError(CredentialError):
    code = "upstream_error"
