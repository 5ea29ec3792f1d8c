# SPDX-License-Identifier: LGPL-3.0-or-later
# Client side of a SCRAM-SHA-1 / SCRAM-SHA-256 conversation (RFC 5802)
#
# Details of the exchange between client and server are in RFC 5802
# Section 5:
#
#   C: n,,n=user,r=fyko+d2lbbFgONRv9qkxdawL
#   S: r=fyko+d2lbbFgONRv9qkxdawL3rfcNHYJY1ZVvWVs7j,s=QSXCR+Q6sek8bf92,i=4096
#   C: c=biws,r=fyko+d2lbbFgONRv9qkxdawL3rfcNHYJY1ZVvWVs7j,p=v0X8v3Bz2T0CJGbJQyF0X+HI4Ts=
#   S: v=rmF9pqV8S7suAoZWja4dJRkFsKQ=

import logging

from collections.abc import Callable
from ssl import RAND_bytes

from .client_final import ClientFinalMessage
from .client_first import ClientFirstMessage
from .common import ScramConfig, saslprep
from .constants import ConversationState, TERMINAL_STATES
from .error import (
    ConversationReused,
    ProtocolError,
    ScramError,
    SCRAM_E_CRYPTO_ERROR,
    SCRAM_E_INVALID_REQUEST,
)
from .method import Method
from .scram_crypto import CryptoDatum, ScramKeys, derive_scram_keys, generate_nonce
from .server_final import ServerFinalMessage
from .server_first import ServerFirstMessage
from .verify import verify_server_nonce, verify_server_signature

logger = logging.getLogger(__name__)


__all__ = ['ScramConversation', 'new_conversation']


class ScramConversation:
    """
    One SCRAM authentication attempt from the client side.

    The caller drives the conversation by passing each server message to
    `step()` (an empty message on the first call) and sending whatever comes
    back, for as long as `step()` reports that more data is expected::

        conversation = new_conversation(new_method('SCRAM-SHA-256'), 'user', 'pencil')
        server_data = b''
        while True:
            client_data, more = conversation.step(server_data)
            if not more:
                break
            server_data = transport.exchange(client_data)

    A conversation is single use. Once it is DONE or FAILED any further call
    to `step()` raises `ConversationReused`; start a new conversation to
    retry. Instances must not be driven from more than one thread at a time.
    """

    def __init__(
        self,
        method: Method,
        username: str,
        password: str,
        *,
        config: ScramConfig | None = None,
        rand_bytes: Callable[[int], bytes] = RAND_bytes,
    ):
        self.__setup_error = None
        if not isinstance(method, Method):
            # Reported by the first step() so that construction itself never fails
            self.__setup_error = ScramError(f'{method!r}: not a SCRAM Method', SCRAM_E_INVALID_REQUEST)
        elif not isinstance(username, str) or not isinstance(password, str):
            self.__setup_error = ScramError('Username and password must be strings', SCRAM_E_INVALID_REQUEST)

        self.__method = method
        self.__username = username
        self.__password = password
        self.__config = config or ScramConfig()
        self.__rand_bytes = rand_bytes

        self.__state = ConversationState.INITIAL
        self.__error = None
        self.__out = b''

        # Messages are retained exactly as sent / received since AuthMessage is computed over the wire text
        self.__client_first_message = None
        self.__server_first_message = None
        self.__client_final_message = None
        self.__server_final_message = None

        self.__keys = None
        self.__server_signature = None

    def __repr__(self):
        return f'<ScramConversation {self.__method} state={self.__state}>'

    @property
    def method(self) -> Method:
        return self.__method

    @property
    def config(self) -> ScramConfig:
        return self.__config

    @property
    def state(self) -> ConversationState:
        return self.__state

    @property
    def done(self) -> bool:
        """ The server has been authenticated and no further steps are expected. """
        return self.__state == ConversationState.DONE

    @property
    def valid(self) -> bool:
        """ False once the conversation has failed. """
        return self.__state != ConversationState.FAILED

    @property
    def error(self) -> ScramError | None:
        """ The error that moved the conversation to FAILED, if any. """
        return self.__error

    @property
    def out(self) -> bytes:
        """ Bytes produced by the most recent step. """
        return self.__out

    @property
    def client_first_message(self) -> ClientFirstMessage | None:
        return self.__client_first_message

    @property
    def server_first_message(self) -> ServerFirstMessage | None:
        return self.__server_first_message

    @property
    def client_final_message(self) -> ClientFinalMessage | None:
        return self.__client_final_message

    @property
    def server_final_message(self) -> ServerFinalMessage | None:
        return self.__server_final_message

    @property
    def auth_message(self) -> bytes | None:
        if self.__client_final_message is None:
            return None

        return self.__client_final_message.auth_message

    @property
    def salted_password(self) -> CryptoDatum | None:
        return self.__keys.salted_password if self.__keys else None

    @property
    def client_key(self) -> CryptoDatum | None:
        return self.__keys.client_key if self.__keys else None

    @property
    def stored_key(self) -> CryptoDatum | None:
        return self.__keys.stored_key if self.__keys else None

    @property
    def server_key(self) -> CryptoDatum | None:
        return self.__keys.server_key if self.__keys else None

    @property
    def server_signature(self) -> CryptoDatum | None:
        """ ServerSignature, available once it has been verified """
        return self.__server_signature

    def step(self, server_data: bytes = b'') -> tuple[bytes, bool]:
        """
        Consume one server message and produce the next client message.

        Args:
            server_data: raw bytes received from the server. Must be empty on
                the first call.

        Returns:
            (client_data, more_expected). `client_data` is what should be sent
            to the server. When `more_expected` is False the server has been
            authenticated and `client_data` is empty.

        Raises:
            TypeError: server_data is not bytes-like
            ConversationReused: the conversation already finished
            ProtocolError: malformed or unexpected server message
            NonceMismatch: server nonce does not extend the client nonce
            ServerRejected: server sent e=
            ServerSignatureMismatch: server could not prove knowledge of the ServerKey
            ScramError: unusable credentials or configuration (SCRAM_E_INVALID_REQUEST)
                or a key derivation failure (SCRAM_E_CRYPTO_ERROR)
        """
        if not isinstance(server_data, (bytes, bytearray, memoryview)):
            raise TypeError('server_data must be bytes')

        if self.__state in TERMINAL_STATES:
            raise ConversationReused(self.__state)

        self.__out = b''

        try:
            if self.__setup_error is not None:
                raise self.__setup_error

            try:
                message = bytes(server_data).decode('utf-8')
            except UnicodeDecodeError:
                raise ProtocolError('Server message is not valid UTF-8')

            match self.__state:
                case ConversationState.INITIAL:
                    out, more = self.__step_client_first(message)
                case ConversationState.CLIENT_FIRST_SENT:
                    out, more = self.__step_client_final(message)
                case ConversationState.COMPLETED:
                    out, more = self.__step_server_final(message)
                case _:
                    raise ScramError(f'{self.__state}: unexpected conversation state')

        except ScramError as e:
            self.__fail(e)
            raise

        self.__out = out
        return out, more

    def __fail(self, error: ScramError):
        logger.warning('%s authentication failed in state %s: %r', self.__method, self.__state, error)
        self.__state = ConversationState.FAILED
        self.__error = error
        self.__out = b''
        self.__password = None

    def __prepare_password(self) -> bytes:
        password = self.__password
        try:
            if self.__config.normalize:
                password = saslprep(password)

            return password.encode()
        except ValueError as e:
            raise ScramError(f'Password cannot be used: {e}', SCRAM_E_INVALID_REQUEST) from e

    def __step_client_first(self, message: str) -> tuple[bytes, bool]:
        if message:
            raise ProtocolError('Unexpected server data before client-first-message')

        try:
            nonce = generate_nonce(self.__config.nonce_size, self.__rand_bytes)
            client_first = ClientFirstMessage(
                username=self.__username,
                nonce=nonce,
                authzid=self.__config.authzid,
                normalize=self.__config.normalize,
            )
        except (TypeError, ValueError) as e:
            # Unusable username, authzid or random byte provider
            raise ScramError(str(e), SCRAM_E_INVALID_REQUEST) from e

        self.__client_first_message = client_first
        self.__state = ConversationState.CLIENT_FIRST_SENT
        logger.debug('%s: sending client-first-message', self.__method)
        return bytes(self.__client_first_message), True

    def __step_client_final(self, message: str) -> tuple[bytes, bool]:
        """
        RFC5802 section 3 (SCRAM Algorithm Overview) has the following description:

        SaltedPassword  := Hi(Normalize(password), salt, i)
        ClientKey       := HMAC(SaltedPassword, "Client Key")
        StoredKey       := H(ClientKey)
        AuthMessage     := client-first-message-bare + "," +
                           server-first-message + "," +
                           client-final-message-without-proof
        ClientSignature := HMAC(StoredKey, AuthMessage)
        ClientProof     := ClientKey XOR ClientSignature
        """
        server_first = ServerFirstMessage(
            rfc_string=message,
            min_iterations=self.__config.min_iterations,
            max_iterations=self.__config.max_iterations,
        )
        verify_server_nonce(self.__client_first_message, server_first)
        self.__server_first_message = server_first

        suite = self.__method.suite
        password = self.__prepare_password()
        try:
            keys: ScramKeys = derive_scram_keys(suite, password, server_first.salt, server_first.iterations)
        except ValueError as e:
            raise ScramError(f'Key derivation failed: {e}', SCRAM_E_CRYPTO_ERROR) from e

        # The password is not needed once the SaltedPassword exists
        self.__password = None
        self.__keys = keys

        self.__client_final_message = ClientFinalMessage(
            client_first=self.__client_first_message,
            server_first=server_first,
            client_key=keys.client_key,
            stored_key=keys.stored_key,
            suite=suite,
        )
        self.__state = ConversationState.COMPLETED
        logger.debug('%s: sending client-final-message (%d iterations)', self.__method, server_first.iterations)
        return bytes(self.__client_final_message), True

    def __step_server_final(self, message: str) -> tuple[bytes, bool]:
        server_final = ServerFinalMessage(rfc_string=message)
        self.__server_final_message = server_final

        self.__server_signature = verify_server_signature(
            self.__client_final_message,
            server_final,
            self.__keys.server_key,
            self.__method.suite,
        )
        self.__state = ConversationState.DONE
        logger.debug('%s: server signature verified', self.__method)
        return b'', False


def new_conversation(
    method: Method,
    username: str,
    password: str,
    *,
    config: ScramConfig | None = None,
    rand_bytes: Callable[[int], bytes] = RAND_bytes,
) -> ScramConversation:
    """ Start a new conversation. Never raises; setup problems surface on the first step(). """
    return ScramConversation(method, username, password, config=config, rand_bytes=rand_bytes)
