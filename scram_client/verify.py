# SPDX-License-Identifier: LGPL-3.0-or-later
# Checks the client applies to what the server sends back

from .scram_crypto import (
    CryptoDatum,
    HashSuite,
    scram_constant_time_compare,
    scram_create_server_signature,
)
from .client_first import ClientFirstMessage
from .server_first import ServerFirstMessage
from .client_final import ClientFinalMessage
from .server_final import ServerFinalMessage
from .error import NonceMismatch, ServerRejected, ServerSignatureMismatch


__all__ = ['verify_server_nonce', 'verify_server_signature']


def verify_server_nonce(client_first: ClientFirstMessage, server_first: ServerFirstMessage):
    """Verify that the server nonce extends the nonce we sent.

    RFC 5802 Section 5.1: the server's r= value is the client nonce with a
    server generated nonce appended to it.

    Raises:
        TypeError: wrong argument types
        NonceMismatch: r= does not start with the client nonce or adds nothing to it
    """
    if not isinstance(client_first, ClientFirstMessage):
        raise TypeError('client_first must be a ClientFirstMessage instance')

    if not isinstance(server_first, ServerFirstMessage):
        raise TypeError('server_first must be a ServerFirstMessage instance')

    client_nonce = client_first.nonce_b64
    if not server_first.nonce.startswith(client_nonce):
        raise NonceMismatch()

    if len(server_first.nonce) == len(client_nonce):
        raise NonceMismatch('Server did not append its own nonce to the client nonce')


def verify_server_signature(
    client_final: ClientFinalMessage,
    server_final: ServerFinalMessage,
    server_key: CryptoDatum,
    suite: HashSuite,
) -> CryptoDatum:
    """Authenticate the server from its v= attribute.

    Only a server holding the same ServerKey can produce
    HMAC(ServerKey, AuthMessage) over the AuthMessage this client signed.
    The comparison is constant time.

    Args:
        client_final: client-final-message as sent, carrying the AuthMessage
        server_final: parsed server-final-message
        server_key: ServerKey derived from the password
        suite: hash suite of the mechanism in use

    Returns:
        The ServerSignature, once it has been checked

    Raises:
        TypeError: wrong argument types
        ServerRejected: server_final carries an e= attribute
        ServerSignatureMismatch: v= is not the expected signature
    """
    if not isinstance(client_final, ClientFinalMessage):
        raise TypeError('client_final must be a ClientFinalMessage instance')

    if not isinstance(server_final, ServerFinalMessage):
        raise TypeError('server_final must be a ServerFinalMessage instance')

    if not isinstance(server_key, CryptoDatum):
        raise TypeError('server_key must be a CryptoDatum instance')

    if server_final.error is not None:
        raise ServerRejected(server_final.error)

    expected_signature = scram_create_server_signature(suite, server_key, client_final.auth_message)

    if not scram_constant_time_compare(expected_signature, server_final.signature):
        raise ServerSignatureMismatch()

    return expected_signature
