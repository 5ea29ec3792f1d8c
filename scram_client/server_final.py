# SPDX-License-Identifier: LGPL-3.0-or-later
# server-final-message: v= signature or e= error

from .scram_crypto import CryptoDatum
from .common import decode_b64_attribute, split_attributes
from .error import ProtocolError


__all__ = ['ServerFinalMessage']


WHAT = 'server-final-message'


class ServerFinalMessage:
    """
    server-final-message received from the server. Format:

        (e=<server-error-value> / v=<base64 ServerSignature>)[,<ext>...]

    Exactly one of `signature` and `error` is set after parsing.
    """
    __rfc_str = '<UNINITIALIZED>'

    def __init__(self, *, rfc_string: str):
        if not isinstance(rfc_string, str):
            raise TypeError('rfc_string must be a string')

        self.__parse_rfc_string(rfc_string)

    def __parse_rfc_string(self, rfc_string: str):
        attributes = split_attributes(rfc_string, WHAT)
        key, value = attributes[0]

        self.__signature = None
        self.__error = None

        match key:
            case 'e':
                self.__error = value
            case 'v':
                signature = decode_b64_attribute(value, 'v', WHAT)
                if not signature:
                    raise ProtocolError(f'Empty server signature in {WHAT}')

                self.__signature = CryptoDatum(signature)
            case _:
                raise ProtocolError(f'Invalid {WHAT} format: must start with "v=" or "e="')

        self.__extensions = tuple(attributes[1:])
        self.__rfc_str = rfc_string

    @property
    def signature(self) -> CryptoDatum | None:
        return self.__signature

    @property
    def error(self) -> str | None:
        """ server-error-value verbatim, if the server reported failure """
        return self.__error

    @property
    def extensions(self) -> tuple[tuple[str, str], ...]:
        return self.__extensions

    def __str__(self):
        return self.__rfc_str
