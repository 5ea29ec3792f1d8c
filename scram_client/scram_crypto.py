# SPDX-License-Identifier: LGPL-3.0-or-later
# SCRAM cryptographic operations for SCRAM-SHA-1 and SCRAM-SHA-256

import hmac
import hashlib

from collections.abc import Callable
from dataclasses import dataclass
from ssl import RAND_bytes

from .constants import SCRAM_NONCE_SIZE


__all__ = [
    'CryptoDatum',
    'HashSuite',
    'SHA1_SUITE',
    'SHA256_SUITE',
    'ScramKeys',
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
]


class CryptoDatum(bytes):
    """bytes subclass for key material. The repr never reveals the contents."""
    def __new__(cls, value):
        return super().__new__(cls, value)

    def __repr__(self):
        return f'CryptoDatum({hex(id(self))})'


@dataclass(frozen=True)
class HashSuite:
    """
    Hash primitives backing one SCRAM mechanism.

    Instances are stateless and may be shared between any number of
    conversations.

    Attributes:
        name: hashlib algorithm name
        digest_size: size in bytes of H() and HMAC() output
    """
    name: str
    digest_size: int

    def h(self, data: bytes) -> bytes:
        """H(str) from RFC 5802 Section 2.2."""
        return hashlib.new(self.name, data).digest()

    def hmac(self, key: bytes, data: bytes) -> bytes:
        """HMAC(key, str) from RFC 5802 Section 2.2."""
        return hmac.digest(key, data, self.name)

    def hi(self, password: bytes, salt: bytes, iterations: int) -> bytes:
        """Hi(str, salt, i) from RFC 5802 Section 2.2. This is PBKDF2 with HMAC as the PRF."""
        return hashlib.pbkdf2_hmac(self.name, password, salt, iterations)


SHA1_SUITE = HashSuite(name='sha1', digest_size=20)
SHA256_SUITE = HashSuite(name='sha256', digest_size=32)


@dataclass
class ScramKeys:
    """Keys derived from a salted password for one conversation."""
    salted_password: CryptoDatum
    client_key: CryptoDatum
    stored_key: CryptoDatum
    server_key: CryptoDatum


def generate_nonce(
    size: int = SCRAM_NONCE_SIZE,
    rand_bytes: Callable[[int], bytes] = RAND_bytes,
) -> CryptoDatum:
    """Generate random bytes for the client nonce.

    Uses RAND_bytes from OpenSSL unless another provider is given. Tests
    pass a deterministic provider here.

    Args:
        size: number of random bytes
        rand_bytes: callable returning `size` random bytes

    Returns:
        CryptoDatum containing the random data

    Raises:
        ValueError: provider returned the wrong amount of data
    """
    if not isinstance(size, int) or size <= 0:
        raise ValueError('Nonce size must be a positive integer')

    nonce_data = rand_bytes(size)
    if not isinstance(nonce_data, bytes) or len(nonce_data) != size:
        raise ValueError(f'Random byte provider did not return {size} bytes')

    return CryptoDatum(nonce_data)


def scram_hi(suite: HashSuite, key: bytes, salt: bytes, iterations: int) -> CryptoDatum:
    """
    Perform PBKDF2 key derivation as specified in RFC 5802.

    This implements the Hi(str, salt, i) function from RFC 5802 Section 2.2
    using the HMAC of the given hash suite.

    Args:
        suite: hash suite of the mechanism in use
        key: Input key material (the prepared password)
        salt: Cryptographic salt for key derivation
        iterations: Number of PBKDF2 iterations

    Returns:
        CryptoDatum containing the SaltedPassword

    Raises:
        TypeError: If iterations is not an integer
        ValueError: If parameters are invalid
    """
    if not isinstance(key, bytes):
        raise ValueError('Invalid key parameter')

    if not isinstance(salt, bytes) or len(salt) == 0:
        raise ValueError('Invalid salt parameter')

    if not isinstance(iterations, int):
        raise TypeError('Iterations must be an integer')

    if iterations < 1:
        raise ValueError('Iterations must be positive')

    return CryptoDatum(suite.hi(bytes(key), bytes(salt), iterations))


def scram_h(suite: HashSuite, data: bytes) -> CryptoDatum:
    """
    Perform the hash function H() as specified in RFC 5802.

    Used primarily for generating the stored key from the client key.
    """
    if not isinstance(data, bytes) or len(data) == 0:
        raise ValueError('Invalid data parameter')

    return CryptoDatum(suite.h(bytes(data)))


def scram_hmac(suite: HashSuite, key: bytes, data: bytes) -> CryptoDatum:
    """
    Perform HMAC() as specified in RFC 5802 Section 2.2.

    Used for generating client keys, server keys, and authentication
    signatures.

    Args:
        suite: hash suite of the mechanism in use
        key: HMAC key material
        data: Data to authenticate

    Returns:
        CryptoDatum containing the HMAC result

    Raises:
        ValueError: If parameters are invalid
    """
    if not isinstance(key, bytes) or len(key) == 0:
        raise ValueError('Invalid key parameter')

    if not isinstance(data, bytes) or len(data) == 0:
        raise ValueError('Invalid data parameter')

    return CryptoDatum(suite.hmac(bytes(key), bytes(data)))


def scram_create_client_key(suite: HashSuite, salted_password: bytes) -> CryptoDatum:
    """ClientKey := HMAC(SaltedPassword, "Client Key")"""
    return scram_hmac(suite, salted_password, b'Client Key')


def scram_create_server_key(suite: HashSuite, salted_password: bytes) -> CryptoDatum:
    """ServerKey := HMAC(SaltedPassword, "Server Key")"""
    return scram_hmac(suite, salted_password, b'Server Key')


def scram_create_stored_key(suite: HashSuite, client_key: bytes) -> CryptoDatum:
    """StoredKey := H(ClientKey)"""
    return scram_h(suite, client_key)


def scram_create_client_signature(suite: HashSuite, stored_key: bytes, auth_message: bytes) -> CryptoDatum:
    """ClientSignature := HMAC(StoredKey, AuthMessage)"""
    return scram_hmac(suite, stored_key, auth_message)


def scram_create_server_signature(suite: HashSuite, server_key: bytes, auth_message: bytes) -> CryptoDatum:
    """ServerSignature := HMAC(ServerKey, AuthMessage)"""
    return scram_hmac(suite, server_key, auth_message)


def scram_xor_bytes(a: bytes, b: bytes) -> CryptoDatum:
    """
    Perform XOR operation on two byte arrays.

    This is used to compute the client proof in SCRAM authentication:
    ClientProof := ClientKey XOR ClientSignature

    Raises:
        ValueError: If parameters are invalid or sizes don't match
    """
    if not isinstance(a, bytes) or len(a) == 0:
        raise ValueError('Invalid first parameter')

    if not isinstance(b, bytes) or len(b) == 0:
        raise ValueError('Invalid second parameter')

    if len(a) != len(b):
        raise ValueError('Byte array sizes do not match')

    return CryptoDatum(bytes(x ^ y for x, y in zip(a, b)))


def scram_constant_time_compare(a: bytes, b: bytes) -> bool:
    """
    Perform constant-time comparison of two byte arrays.

    Uses hmac.compare_digest so that the time taken does not depend on the
    position of the first differing byte.
    """
    if not isinstance(a, bytes) or not isinstance(b, bytes):
        raise ValueError('Both parameters must be bytes')

    # hmac.compare_digest handles size mismatches without leaking contents
    return hmac.compare_digest(bytes(a), bytes(b))


def scram_create_auth_message(
    client_first_bare: str,
    server_first_msg: str,
    client_final_without_proof: str
) -> bytes:
    """
    Create SCRAM authentication message as specified in RFC 5802 Section 3:

    AuthMessage := client-first-message-bare + "," +
                   server-first-message + "," +
                   client-final-message-without-proof

    Each argument must be the exact text that went over the wire.

    Returns:
        UTF-8 bytes of the auth message
    """
    if not isinstance(client_first_bare, str) or not client_first_bare:
        raise ValueError('Invalid client_first_bare parameter')

    if not isinstance(server_first_msg, str) or not server_first_msg:
        raise ValueError('Invalid server_first_msg parameter')

    if not isinstance(client_final_without_proof, str) or not client_final_without_proof:
        raise ValueError('Invalid client_final_without_proof parameter')

    return f'{client_first_bare},{server_first_msg},{client_final_without_proof}'.encode()


def derive_scram_keys(suite: HashSuite, password: bytes, salt: bytes, iterations: int) -> ScramKeys:
    """
    Run the key schedule of RFC 5802 Section 3 for one password.

    SaltedPassword  := Hi(Normalize(password), salt, i)
    ClientKey       := HMAC(SaltedPassword, "Client Key")
    StoredKey       := H(ClientKey)
    ServerKey       := HMAC(SaltedPassword, "Server Key")
    """
    salted_password = scram_hi(suite, password, salt, iterations)
    client_key = scram_create_client_key(suite, salted_password)
    return ScramKeys(
        salted_password=salted_password,
        client_key=client_key,
        stored_key=scram_create_stored_key(suite, client_key),
        server_key=scram_create_server_key(suite, salted_password),
    )
