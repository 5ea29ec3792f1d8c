# SPDX-License-Identifier: LGPL-3.0-or-later
"""Constants and enums for SCRAM conversations."""
from enum import StrEnum


class ScramMechanism(StrEnum):
    """SASL mechanism names this client implements."""
    SCRAM_SHA_1 = 'SCRAM-SHA-1'
    SCRAM_SHA_256 = 'SCRAM-SHA-256'


class ConversationState(StrEnum):
    """Phases of a client conversation."""
    INITIAL = 'INITIAL'
    CLIENT_FIRST_SENT = 'CLIENT_FIRST_SENT'
    COMPLETED = 'COMPLETED'  # client-final-message sent, waiting for server-final-message
    DONE = 'DONE'
    FAILED = 'FAILED'


class ServerErrorValue(StrEnum):
    """server-error-value vocabulary from RFC 5802, Section 7."""
    INVALID_ENCODING = 'invalid-encoding'
    EXTENSIONS_NOT_SUPPORTED = 'extensions-not-supported'
    INVALID_PROOF = 'invalid-proof'
    CHANNEL_BINDINGS_DONT_MATCH = 'channel-bindings-dont-match'
    SERVER_DOES_SUPPORT_CHANNEL_BINDING = 'server-does-support-channel-binding'
    CHANNEL_BINDING_NOT_SUPPORTED = 'channel-binding-not-supported'
    UNSUPPORTED_CHANNEL_BINDING_TYPE = 'unsupported-channel-binding-type'
    UNKNOWN_USER = 'unknown-user'
    INVALID_USERNAME_ENCODING = 'invalid-username-encoding'
    NO_RESOURCES = 'no-resources'
    OTHER_ERROR = 'other-error'


TERMINAL_STATES = frozenset((ConversationState.DONE, ConversationState.FAILED))

# Iteration limits
SCRAM_MIN_ITERS = 4096  # RFC 5802 example value and the floor most servers use
SCRAM_MAX_ITERS = 5000000  # in theory prevents DOS from malicious server

# Nonce sizes in bytes of entropy
SCRAM_NONCE_SIZE = 24
SCRAM_MIN_NONCE_SIZE = 18
