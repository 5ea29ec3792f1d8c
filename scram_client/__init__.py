# SPDX-License-Identifier: LGPL-3.0-or-later
# Client side SCRAM-SHA-1 / SCRAM-SHA-256 (RFC 5802) conversation engine.
#
# The engine never performs I/O. The caller hands it each server message and
# sends back whatever it returns:
#
#     method = new_method('SCRAM-SHA-256')
#     conversation = new_conversation(method, 'user', 'pencil')
#     client_data, more = conversation.step(b'')

from .error import (
    ScramError,
    UnsupportedMechanism,
    ProtocolError,
    NonceMismatch,
    ServerRejected,
    ServerSignatureMismatch,
    ConversationReused,
    SCRAM_E_INVALID_REQUEST,
    SCRAM_E_UNSUPPORTED_MECHANISM,
    SCRAM_E_CRYPTO_ERROR,
    SCRAM_E_BASE64_ERROR,
    SCRAM_E_PARSE_ERROR,
    SCRAM_E_NONCE_MISMATCH,
    SCRAM_E_AUTH_FAILED,
    SCRAM_E_SERVER_REJECTED,
    SCRAM_E_CONVERSATION_REUSED,
    SCRAM_E_FAULT,
)

from .constants import (
    ScramMechanism,
    ConversationState,
    ServerErrorValue,
    SCRAM_MAX_ITERS,
    SCRAM_MIN_ITERS,
    SCRAM_NONCE_SIZE,
    SCRAM_MIN_NONCE_SIZE,
)

from .scram_crypto import (
    CryptoDatum,
    HashSuite,
    SHA1_SUITE,
    SHA256_SUITE,
    ScramKeys,
    generate_nonce,
    scram_hi,
    scram_h,
    scram_hmac,
    scram_create_client_key,
    scram_create_server_key,
    scram_create_stored_key,
    scram_create_client_signature,
    scram_create_server_signature,
    scram_xor_bytes,
    scram_constant_time_compare,
    scram_create_auth_message,
    derive_scram_keys,
)

from .common import (
    GS2_CBIND_FLAG,
    GS2_NO_CHANNEL_BINDING,
    ScramConfig,
    saslprep,
)

from .method import Method, new_method

from .client_first import ClientFirstMessage
from .server_first import ServerFirstMessage
from .client_final import ClientFinalMessage
from .server_final import ServerFinalMessage

from .verify import (
    verify_server_nonce,
    verify_server_signature,
)

from .conversation import ScramConversation, new_conversation
from .client import ScramClient


__all__ = [
    # Entry points
    'new_method',
    'new_conversation',
    'Method',
    'ScramConversation',
    'ScramClient',
    'ScramConfig',

    # Exceptions
    'ScramError',
    'UnsupportedMechanism',
    'ProtocolError',
    'NonceMismatch',
    'ServerRejected',
    'ServerSignatureMismatch',
    'ConversationReused',

    # Enums
    'ScramMechanism',
    'ConversationState',
    'ServerErrorValue',

    # Core types
    'CryptoDatum',
    'HashSuite',
    'ScramKeys',
    'SHA1_SUITE',
    'SHA256_SUITE',

    # Message classes
    'ClientFirstMessage',
    'ServerFirstMessage',
    'ClientFinalMessage',
    'ServerFinalMessage',

    # Verification functions
    'verify_server_nonce',
    'verify_server_signature',

    # Cryptographic functions
    'generate_nonce',
    'scram_hi',
    'scram_h',
    'scram_hmac',
    'scram_create_client_key',
    'scram_create_server_key',
    'scram_create_stored_key',
    'scram_create_client_signature',
    'scram_create_server_signature',
    'scram_xor_bytes',
    'scram_constant_time_compare',
    'scram_create_auth_message',
    'derive_scram_keys',
    'saslprep',

    # Error codes
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

    # Constants
    'GS2_CBIND_FLAG',
    'GS2_NO_CHANNEL_BINDING',
    'SCRAM_MAX_ITERS',
    'SCRAM_MIN_ITERS',
    'SCRAM_NONCE_SIZE',
    'SCRAM_MIN_NONCE_SIZE',
]
