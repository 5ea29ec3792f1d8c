# SPDX-License-Identifier: LGPL-3.0-or-later
# client-final-message: channel binding, combined nonce and ClientProof

from base64 import b64encode

from .scram_crypto import (
    CryptoDatum,
    HashSuite,
    scram_create_auth_message,
    scram_create_client_signature,
    scram_xor_bytes,
)
from .client_first import ClientFirstMessage
from .server_first import ServerFirstMessage


__all__ = ['ClientFinalMessage']


class ClientFinalMessage:
    __rfc_str = '<UNINITIALIZED>'

    def __compute_client_proof(
        self,
        suite: HashSuite,
        client_key: CryptoDatum,
        stored_key: CryptoDatum,
    ) -> CryptoDatum:
        """Sign the AuthMessage with StoredKey and mask ClientKey with the result.

        ClientSignature = HMAC(StoredKey, AuthMessage)
        ClientProof = ClientKey XOR ClientSignature
        """
        self.__client_signature = scram_create_client_signature(suite, stored_key, self.__auth_message)
        return scram_xor_bytes(client_key, self.__client_signature)

    def __init__(
        self,
        *,
        client_first: ClientFirstMessage,
        server_first: ServerFirstMessage,
        client_key: CryptoDatum,
        stored_key: CryptoDatum,
        suite: HashSuite,
    ):
        if not isinstance(client_first, ClientFirstMessage):
            raise TypeError('client_first must be a ClientFirstMessage instance')

        if not isinstance(server_first, ServerFirstMessage):
            raise TypeError('server_first must be a ServerFirstMessage instance')

        if not isinstance(client_key, CryptoDatum):
            raise TypeError('client_key must be a CryptoDatum instance')

        if not isinstance(stored_key, CryptoDatum):
            raise TypeError('stored_key must be a CryptoDatum instance')

        if not isinstance(suite, HashSuite):
            raise TypeError('suite must be a HashSuite instance')

        # r= repeats the combined client + server nonce
        self.__nonce = server_first.nonce

        # c= carries the base64 of the GS2 header sent in client-first-message ("biws" for "n,,")
        self.__channel_binding = b64encode(client_first.gs2_header.encode()).decode()
        self.__without_proof = f'c={self.__channel_binding},r={self.__nonce}'

        # AuthMessage is built from the literal wire strings, never from re-serialized fields
        self.__auth_message = scram_create_auth_message(
            client_first.bare,
            str(server_first),
            self.__without_proof,
        )

        self.__client_proof = self.__compute_client_proof(suite, client_key, stored_key)
        client_proof_b64 = b64encode(self.__client_proof).decode()
        self.__rfc_str = f'{self.__without_proof},p={client_proof_b64}'

    @property
    def nonce(self) -> str:
        return self.__nonce

    @property
    def channel_binding(self) -> str:
        """ base64 encoded GS2 header """
        return self.__channel_binding

    @property
    def without_proof(self) -> str:
        """ client-final-message-without-proof, the last component of AuthMessage """
        return self.__without_proof

    @property
    def auth_message(self) -> bytes:
        return self.__auth_message

    @property
    def client_signature(self) -> CryptoDatum:
        return self.__client_signature

    @property
    def client_proof(self) -> CryptoDatum:
        return self.__client_proof

    def __str__(self):
        return self.__rfc_str

    def __bytes__(self):
        return self.__rfc_str.encode()
