# SPDX-License-Identifier: LGPL-3.0-or-later
# Mechanism selection

from dataclasses import dataclass

from .constants import ScramMechanism
from .error import UnsupportedMechanism
from .scram_crypto import HashSuite, SHA1_SUITE, SHA256_SUITE


__all__ = ['Method', 'new_method', 'HASH_SUITES']


HASH_SUITES = {
    ScramMechanism.SCRAM_SHA_1: SHA1_SUITE,
    ScramMechanism.SCRAM_SHA_256: SHA256_SUITE,
}


@dataclass(frozen=True)
class Method:
    """
    The SCRAM variant used by a conversation. Use `new_method()` rather than
    constructing this directly.

    Example::

        method = new_method('SCRAM-SHA-256')
        conversation = new_conversation(method, 'user', 'pencil')

    """
    mechanism: ScramMechanism

    @property
    def suite(self) -> HashSuite:
        return HASH_SUITES[self.mechanism]

    def __str__(self):
        return str(self.mechanism)


def new_method(name: str) -> Method:
    """
    Return the Method for `name`.

    Only the exact strings "SCRAM-SHA-1" and "SCRAM-SHA-256" are accepted.
    Case variants and "-PLUS" names are rejected.

    Raises:
        UnsupportedMechanism: `name` is not a supported mechanism
    """
    if not isinstance(name, str) or name not in HASH_SUITES:
        raise UnsupportedMechanism(name)

    return Method(mechanism=ScramMechanism(name))
