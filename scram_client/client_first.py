# SPDX-License-Identifier: LGPL-3.0-or-later
# client-first-message: GS2 header, saslname and client nonce

from base64 import b64encode

from .scram_crypto import CryptoDatum, generate_nonce
from .common import escape_saslname, gs2_header, saslprep


__all__ = ['ClientFirstMessage']


class ClientFirstMessage:
    """
    client-first-message from RFC 5802, Section 7:

        n,,n=<saslname>,r=<c-nonce>

    The GS2 header ("n,," or "n,a=<authzid>,") says that channel binding is
    not supported. The client nonce is base64 of random bytes so it never
    contains a comma.
    """
    __rfc_str = '<UNINITIALIZED>'

    def __generate_rfc_string(self):
        return f'{self.gs2_header}{self.bare}'

    def __init__(
        self,
        *,
        username: str,
        nonce: bytes | None = None,
        authzid: str | None = None,
        normalize: bool = False,
    ):
        if not isinstance(username, str):
            raise TypeError('Username must be string')

        if not username:
            raise ValueError('Must specify username')

        if authzid is not None and not isinstance(authzid, str):
            raise TypeError('authzid must be string if provided')

        if nonce is None:
            nonce = generate_nonce()
        elif not isinstance(nonce, bytes) or not nonce:
            raise TypeError('nonce must be non-empty bytes')

        if normalize:
            # RFC 5802, Section 5.1: the client SHOULD prepare the username with SASLprep,
            # treating it as a query string.
            username = saslprep(username)
            if authzid:
                authzid = saslprep(authzid)

            if not username:
                raise ValueError('Username is empty after SASLprep')

        self.__nonce = CryptoDatum(nonce)
        self.__nonce_b64 = b64encode(nonce).decode()
        self.__username = username
        self.__authzid = authzid
        self.__gs2_header = gs2_header(authzid)
        self.__bare = f'n={escape_saslname(username)},r={self.__nonce_b64}'
        self.__rfc_str = self.__generate_rfc_string()

    @property
    def nonce(self) -> CryptoDatum:
        return self.__nonce

    @property
    def nonce_b64(self) -> str:
        """ c-nonce exactly as sent on the wire """
        return self.__nonce_b64

    @property
    def username(self) -> str:
        return self.__username

    @property
    def authzid(self) -> str | None:
        return self.__authzid

    @property
    def gs2_header(self) -> str:
        return self.__gs2_header

    @property
    def bare(self) -> str:
        """ client-first-message-bare, the first component of AuthMessage """
        return self.__bare

    def __str__(self):
        return self.__rfc_str

    def __bytes__(self):
        return self.__rfc_str.encode()
