# SPDX-License-Identifier: LGPL-3.0-or-later
# SCRAM exception classes

# Error codes
SCRAM_E_INVALID_REQUEST = 1
SCRAM_E_UNSUPPORTED_MECHANISM = 2
SCRAM_E_CRYPTO_ERROR = 3
SCRAM_E_BASE64_ERROR = 4
SCRAM_E_PARSE_ERROR = 5
SCRAM_E_NONCE_MISMATCH = 6
SCRAM_E_AUTH_FAILED = 7
SCRAM_E_SERVER_REJECTED = 8
SCRAM_E_CONVERSATION_REUSED = 9
SCRAM_E_FAULT = 10

# Error code to string mapping
ERROR_CODE_NAMES = {
    SCRAM_E_INVALID_REQUEST: "SCRAM_E_INVALID_REQUEST",
    SCRAM_E_UNSUPPORTED_MECHANISM: "SCRAM_E_UNSUPPORTED_MECHANISM",
    SCRAM_E_CRYPTO_ERROR: "SCRAM_E_CRYPTO_ERROR",
    SCRAM_E_BASE64_ERROR: "SCRAM_E_BASE64_ERROR",
    SCRAM_E_PARSE_ERROR: "SCRAM_E_PARSE_ERROR",
    SCRAM_E_NONCE_MISMATCH: "SCRAM_E_NONCE_MISMATCH",
    SCRAM_E_AUTH_FAILED: "SCRAM_E_AUTH_FAILED",
    SCRAM_E_SERVER_REJECTED: "SCRAM_E_SERVER_REJECTED",
    SCRAM_E_CONVERSATION_REUSED: "SCRAM_E_CONVERSATION_REUSED",
    SCRAM_E_FAULT: "SCRAM_E_FAULT",
}


class ScramError(RuntimeError):
    """
    Base class for every failure raised by the SCRAM engine.

    Attributes:
        code: Integer error code (one of SCRAM_E_* constants)
    """

    def __init__(self, message: str, code: int = SCRAM_E_FAULT):
        """
        Initialize ScramError.

        Args:
            message: Error message
            code: Error code (defaults to SCRAM_E_FAULT)
        """
        super().__init__(message)
        self.code = code

    def __repr__(self):
        """Return repr of the error."""
        code_name = ERROR_CODE_NAMES.get(self.code, "UNKNOWN_ERROR")
        return f"{type(self).__name__}({code_name}: {super().__str__()})"


class UnsupportedMechanism(ScramError):
    """The requested mechanism name is not one this client implements."""

    def __init__(self, mechanism: str):
        super().__init__(f'{mechanism!r}: unsupported SCRAM mechanism', SCRAM_E_UNSUPPORTED_MECHANISM)
        self.mechanism = mechanism


class ProtocolError(ScramError):
    """A server message was malformed or arrived out of order."""

    def __init__(self, detail: str, code: int = SCRAM_E_PARSE_ERROR):
        super().__init__(detail, code)
        self.detail = detail


class NonceMismatch(ProtocolError):
    """The nonce returned by the server does not extend the client nonce."""

    def __init__(self, detail: str = 'Server nonce does not extend client nonce'):
        super().__init__(detail, SCRAM_E_NONCE_MISMATCH)


class ServerRejected(ScramError):
    """
    The server ended the conversation with an ``e=`` attribute.

    Attributes:
        reason: server-error-value exactly as sent by the server
    """

    def __init__(self, reason: str):
        super().__init__(f'Server rejected authentication: {reason}', SCRAM_E_SERVER_REJECTED)
        self.reason = reason


class ServerSignatureMismatch(ScramError):
    """The server could not prove knowledge of the ServerKey."""

    def __init__(self):
        super().__init__('Server signature does not match', SCRAM_E_AUTH_FAILED)


class ConversationReused(ScramError):
    """step() was called on a conversation that has already finished."""

    def __init__(self, state: str):
        super().__init__(f'{state}: conversation is finished and cannot be reused', SCRAM_E_CONVERSATION_REUSED)
        self.state = state


__all__ = [
    'ScramError',
    'UnsupportedMechanism',
    'ProtocolError',
    'NonceMismatch',
    'ServerRejected',
    'ServerSignatureMismatch',
    'ConversationReused',
    'SCRAM_E_INVALID_REQUEST',
    'SCRAM_E_UNSUPPORTED_MECHANISM',
    'SCRAM_E_CRYPTO_ERROR',
    'SCRAM_E_BASE64_ERROR',
    'SCRAM_E_PARSE_ERROR',
    'SCRAM_E_NONCE_MISMATCH',
    'SCRAM_E_AUTH_FAILED',
    'SCRAM_E_SERVER_REJECTED',
    'SCRAM_E_CONVERSATION_REUSED',
    'SCRAM_E_FAULT',
]
