"""
Exception hierarchy for und_core.

Every error raised by the SDK derives from :class:`UndError` and also from
the built-in exception that best describes it, so callers may catch either
``UndError`` or e.g. ``ValueError``.
"""

from __future__ import annotations


class UndError(Exception):
    """Base class for all SDK errors."""


class ValidationError(UndError, ValueError):
    """Bad caller input, raised before any network or crypto work."""


class UnsupportedMessageError(ValidationError, TypeError):
    """A message type tag outside the supported set."""

    def __init__(self, type_tag: object):
        self.type_tag = type_tag
        super().__init__(f"unsupported message type: {type_tag!r}")


class KeystoreError(UndError, ValueError):
    """Keystore could not be decrypted or uses unsupported parameters."""


class SigningError(UndError, RuntimeError):
    """Signing pipeline misuse (no key set, signed twice, not yet signed)."""


class DeviceError(SigningError):
    """The hardware device reported a failure or could not be reached."""

    def __init__(self, message: str, return_code: int | None = None,
                 error_message: str = ""):
        self.return_code = return_code
        self.error_message = error_message
        if return_code is not None:
            message = f"{message} (return code 0x{return_code:04x})"
        super().__init__(message)


class TransportError(UndError, ConnectionError):
    """The node could not be reached or returned no usable response."""

    def __init__(self, message: str, status: int | None = None):
        self.status = status
        super().__init__(message)
