# SPDX-License-Identifier: LGPL-3.0-or-later
# Shared wire codec helpers and conversation configuration

import binascii
import re
import stringprep
import unicodedata
from base64 import b64decode
from dataclasses import dataclass

from .constants import SCRAM_MAX_ITERS, SCRAM_MIN_ITERS, SCRAM_MIN_NONCE_SIZE, SCRAM_NONCE_SIZE
from .error import ProtocolError, SCRAM_E_BASE64_ERROR


__all__ = [
    'GS2_CBIND_FLAG',
    'GS2_NO_CHANNEL_BINDING',
    'ScramConfig',
    'saslprep',
    'escape_saslname',
    'gs2_header',
    'split_attributes',
    'decode_b64_attribute',
]


# Constants
GS2_CBIND_FLAG = 'n'  # client does not support channel binding
GS2_NO_CHANNEL_BINDING = 'biws'  # base64 of "n,,"

ATTRIBUTE_RE = re.compile(r'([A-Za-z])=(.*)', re.DOTALL)


@dataclass(frozen=True, kw_only=True)
class ScramConfig:
    """
    Optional knobs for a client conversation.

    normalize - apply SASLprep (RFC 4013) to username and password before use
    authzid - authorization identity to send in the GS2 header
    nonce_size - bytes of random data in the client nonce
    min_iterations / max_iterations - accepted range for the server iteration count
    """
    normalize: bool = False
    authzid: str | None = None
    nonce_size: int = SCRAM_NONCE_SIZE
    min_iterations: int = SCRAM_MIN_ITERS
    max_iterations: int = SCRAM_MAX_ITERS

    def __post_init__(self):
        if self.authzid is not None and not isinstance(self.authzid, str):
            raise TypeError('authzid must be a string if provided')

        if not isinstance(self.nonce_size, int) or self.nonce_size < SCRAM_MIN_NONCE_SIZE:
            raise ValueError(f'nonce_size must be an integer of at least {SCRAM_MIN_NONCE_SIZE}')

        if not isinstance(self.min_iterations, int) or self.min_iterations < 1:
            raise ValueError('min_iterations must be a positive integer')

        if not isinstance(self.max_iterations, int) or self.max_iterations < self.min_iterations:
            raise ValueError('max_iterations must be an integer no smaller than min_iterations')


def saslprep(input_str: str) -> str:
    """
    Implements the SASLprep profile of stringprep (RFC 4013).

    Per RFC 5802, Section 5.1, this treats the string as a query string,
    meaning unassigned Unicode code points are allowed.

    Args:
        input_str: The string to prepare

    Returns:
        The prepared string

    Raises:
        TypeError: If input_str is not a string
        ValueError: If the string contains prohibited characters or violates bidi rules
    """
    if not isinstance(input_str, str):
        raise TypeError('input_str must be a string')

    if not input_str:
        return input_str

    # RFC 4013, Section 2.1: non-ASCII spaces map to SPACE, Table B.1 maps to nothing
    mapped = ''.join(
        ' ' if stringprep.in_table_c12(c) else c
        for c in input_str
        if not stringprep.in_table_b1(c)
    )

    # RFC 4013, Section 2.2: Normalization form KC
    normalized = unicodedata.normalize('NFKC', mapped)

    # RFC 4013, Section 2.3: Prohibited Output
    prohibited = (
        (stringprep.in_table_c12, 'C.1.2: Non-ASCII space'),
        (stringprep.in_table_c21, 'C.2.1: ASCII control'),
        (stringprep.in_table_c22, 'C.2.2: Non-ASCII control'),
        (stringprep.in_table_c3, 'C.3: Private use'),
        (stringprep.in_table_c4, 'C.4: Non-character'),
        (stringprep.in_table_c5, 'C.5: Surrogate'),
        (stringprep.in_table_c6, 'C.6: Inappropriate for plain text'),
        (stringprep.in_table_c7, 'C.7: Inappropriate for canonical representation'),
        (stringprep.in_table_c8, 'C.8: Change display properties'),
        (stringprep.in_table_c9, 'C.9: Tagging character'),
    )
    for i, c in enumerate(normalized):
        for in_table, description in prohibited:
            if in_table(c):
                raise ValueError(f'Character at position {i} is prohibited (RFC 3454, {description})')

    # RFC 4013, Section 2.4: Bidirectional Characters (RFC 3454, Section 6)
    has_RandALCat = any(stringprep.in_table_d1(c) for c in normalized)
    has_LCat = any(stringprep.in_table_d2(c) for c in normalized)

    if has_RandALCat:
        if has_LCat:
            raise ValueError(
                'String contains both RandALCat and LCat characters (RFC 3454, Section 6)'
            )

        if not stringprep.in_table_d1(normalized[0]) or not stringprep.in_table_d1(normalized[-1]):
            raise ValueError(
                'First and last characters must be RandALCat when string contains RandALCat '
                '(RFC 3454, Section 6)'
            )

    return normalized


def escape_saslname(name: str) -> str:
    """ Encode a username or authzid as a saslname (RFC 5802, Section 5.1). """
    return name.replace('=', '=3D').replace(',', '=2C')


def split_attributes(message: str, what: str) -> list[tuple[str, str]]:
    """
    Split a SCRAM message into (attribute, value) pairs, keeping wire order.

    `what` names the message in error details.

    Raises:
        ProtocolError: message is empty or a segment is not `ALPHA "=" value`
    """
    if not message:
        raise ProtocolError(f'Empty {what}')

    attributes = []
    for part in message.split(','):
        if not (m := ATTRIBUTE_RE.fullmatch(part)):
            raise ProtocolError(f'Invalid attribute in {what}: {part!r}')

        attributes.append((m.group(1), m.group(2)))

    return attributes


def decode_b64_attribute(value: str, attribute: str, what: str) -> bytes:
    """ Strictly decode a base64 attribute value. """
    try:
        return b64decode(value, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ProtocolError(f'Invalid base64 encoding for {attribute}= in {what}: {e}', SCRAM_E_BASE64_ERROR)


def gs2_header(authzid: str | None = None) -> str:
    """ GS2 header that prefixes client-first-message, e.g. "n,," or "n,a=admin,". """
    authzid_part = f'a={escape_saslname(authzid)}' if authzid else ''
    return f'{GS2_CBIND_FLAG},{authzid_part},'
