# SPDX-License-Identifier: LGPL-3.0-or-later
# server-first-message: combined nonce, salt and iteration count

import re

from .constants import SCRAM_MAX_ITERS, SCRAM_MIN_ITERS
from .scram_crypto import CryptoDatum
from .common import decode_b64_attribute, split_attributes
from .error import ProtocolError, SCRAM_E_INVALID_REQUEST


__all__ = ['ServerFirstMessage']


ITERATION_COUNT_RE = re.compile(r'[1-9][0-9]*')
WHAT = 'server-first-message'


class ServerFirstMessage:
    """
    server-first-message received from the server. Format:

        [m=<ext>,]r=<c-nonce><s-nonce>,s=<base64 salt>,i=<iterations>[,<ext>...]

    The original text is retained verbatim because it is part of the
    AuthMessage. The nonce is kept as text: the server half is any printable
    string and is not base64.
    """
    __rfc_str = '<UNINITIALIZED>'

    def __init__(
        self,
        *,
        rfc_string: str,
        min_iterations: int = SCRAM_MIN_ITERS,
        max_iterations: int = SCRAM_MAX_ITERS,
    ):
        if not isinstance(rfc_string, str):
            raise TypeError('rfc_string must be a string')

        self.__parse_rfc_string(rfc_string, min_iterations, max_iterations)

    def __parse_rfc_string(self, rfc_string: str, min_iterations: int, max_iterations: int):
        attributes = split_attributes(rfc_string, WHAT)

        if attributes[0][0] == 'm':
            raise ProtocolError(f'Unsupported mandatory extension in {WHAT}')

        if len(attributes) < 3:
            raise ProtocolError(f'Missing required fields in {WHAT}')

        for (key, _), expected in zip(attributes, ('r', 's', 'i')):
            if key != expected:
                raise ProtocolError(f'Expected {expected}= in {WHAT}, got {key}=')

        nonce = attributes[0][1]
        if not nonce:
            raise ProtocolError(f'Empty nonce in {WHAT}')

        salt = decode_b64_attribute(attributes[1][1], 's', WHAT)
        if not salt:
            raise ProtocolError(f'Empty salt in {WHAT}')

        iterations_str = attributes[2][1]
        if not ITERATION_COUNT_RE.fullmatch(iterations_str):
            raise ProtocolError(f'Invalid iteration count in {WHAT}: {iterations_str!r}')

        iterations = int(iterations_str)
        if iterations < min_iterations:
            raise ProtocolError(f'{iterations}: iteration count is below minimum of {min_iterations}')

        if iterations > max_iterations:
            raise ProtocolError(
                f'{iterations}: exceeds maximum of {max_iterations}',
                SCRAM_E_INVALID_REQUEST
            )

        self.__nonce = nonce
        self.__salt = CryptoDatum(salt)
        self.__iterations = iterations
        self.__extensions = tuple(attributes[3:])
        self.__rfc_str = rfc_string

    @property
    def nonce(self) -> str:
        """ Combined client + server nonce """
        return self.__nonce

    @property
    def salt(self) -> CryptoDatum:
        return self.__salt

    @property
    def iterations(self) -> int:
        return self.__iterations

    @property
    def extensions(self) -> tuple[tuple[str, str], ...]:
        """ Optional trailing attributes. These are ignored by the client. """
        return self.__extensions

    def __str__(self):
        return self.__rfc_str
