# SPDX-License-Identifier: LGPL-3.0-or-later
"""Test SCRAM cryptographic primitives against published test vectors."""

import unittest
from base64 import b64decode

import scram_client
from scram_client import SHA1_SUITE, SHA256_SUITE


class TestHashSuite(unittest.TestCase):
    """Test the SHA-1 and SHA-256 hash suites."""

    def test_h(self):
        """FIPS 180 "abc" digests."""
        self.assertEqual(
            SHA1_SUITE.h(b"abc").hex(),
            "a9993e364706816aba3e25717850c26c9cd0d89d"
        )
        self.assertEqual(
            SHA256_SUITE.h(b"abc").hex(),
            "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
        )

    def test_hmac(self):
        """RFC 2202 / RFC 4231 test case 2."""
        key = b"Jefe"
        data = b"what do ya want for nothing?"

        self.assertEqual(
            SHA1_SUITE.hmac(key, data).hex(),
            "effcdf6ae5eb2fa2d27416d5f184df9c259a7c79"
        )
        self.assertEqual(
            SHA256_SUITE.hmac(key, data).hex(),
            "5bdcc146bf60754e6a042426089575c75a003f089d2739839dec58b964ec3843"
        )

    def test_hi(self):
        """RFC 6070 PBKDF2-HMAC-SHA1 vectors and the matching SHA-256 value."""
        self.assertEqual(
            SHA1_SUITE.hi(b"password", b"salt", 1).hex(),
            "0c60c80f961f0e71f3a9b524af6012062fe037a6"
        )
        self.assertEqual(
            SHA1_SUITE.hi(b"password", b"salt", 4096).hex(),
            "4b007901b765489abead49d926f721d065a429c1"
        )
        self.assertEqual(
            SHA256_SUITE.hi(b"password", b"salt", 1).hex(),
            "120fb6cffcf8b32c43e7225256c4f837a86548c92ccc35480805987cb70be17b"
        )

    def test_digest_sizes(self):
        for suite in (SHA1_SUITE, SHA256_SUITE):
            with self.subTest(suite=suite.name):
                self.assertEqual(len(suite.h(b"x")), suite.digest_size)
                self.assertEqual(len(suite.hmac(b"k", b"x")), suite.digest_size)
                self.assertEqual(len(suite.hi(b"p", b"s", 2)), suite.digest_size)


class TestCryptoFunctions(unittest.TestCase):
    """Test the wrappers used by the conversation."""

    def test_scram_hi(self):
        result = scram_client.scram_hi(SHA256_SUITE, b"password", b"salt1234", 4096)

        self.assertIsInstance(result, scram_client.CryptoDatum)
        self.assertEqual(len(result), 32)

    def test_scram_hi_empty_password(self):
        """An empty password is still a valid PBKDF2 input."""
        result = scram_client.scram_hi(SHA1_SUITE, b"", b"salt", 1)

        self.assertEqual(len(result), 20)

    def test_scram_hi_invalid(self):
        with self.assertRaises(ValueError):
            scram_client.scram_hi(SHA1_SUITE, b"password", b"", 4096)

        with self.assertRaises(ValueError):
            scram_client.scram_hi(SHA1_SUITE, b"password", b"salt", 0)

        with self.assertRaises(TypeError):
            scram_client.scram_hi(SHA1_SUITE, b"password", b"salt", "4096")  # type: ignore

        with self.assertRaises(ValueError):
            scram_client.scram_hi(SHA1_SUITE, "password", b"salt", 4096)  # type: ignore

    def test_scram_hmac_invalid(self):
        with self.assertRaises(ValueError):
            scram_client.scram_hmac(SHA1_SUITE, b"", b"data")

        with self.assertRaises(ValueError):
            scram_client.scram_hmac(SHA1_SUITE, b"key", b"")

    def test_scram_xor_bytes(self):
        a = scram_client.CryptoDatum(b"\x01\x02\x03")
        b = scram_client.CryptoDatum(b"\x04\x05\x06")

        result = scram_client.scram_xor_bytes(a, b)

        self.assertEqual(bytes(result), bytes([0x01 ^ 0x04, 0x02 ^ 0x05, 0x03 ^ 0x06]))

    def test_scram_xor_bytes_size_mismatch(self):
        with self.assertRaises(ValueError):
            scram_client.scram_xor_bytes(b"\x01\x02", b"\x01")

    def test_scram_constant_time_compare(self):
        self.assertTrue(scram_client.scram_constant_time_compare(b"test", b"test"))
        self.assertFalse(scram_client.scram_constant_time_compare(b"test", b"diff"))
        self.assertFalse(scram_client.scram_constant_time_compare(b"test", b"tes"))

    def test_scram_create_auth_message(self):
        result = scram_client.scram_create_auth_message("n=user,r=abc", "r=abcdef,s=c2FsdA==,i=4096", "c=biws,r=abcdef")

        self.assertEqual(result, b"n=user,r=abc,r=abcdef,s=c2FsdA==,i=4096,c=biws,r=abcdef")

    def test_scram_create_auth_message_invalid(self):
        with self.assertRaises(ValueError):
            scram_client.scram_create_auth_message("", "r=a,s=b,i=1", "c=biws,r=a")

    def test_derive_scram_keys(self):
        """RFC 5802 Section 5 SHA-1 example keys are internally consistent."""
        keys = scram_client.derive_scram_keys(SHA1_SUITE, b"pencil", b64decode("QSXCR+Q6sek8bf92"), 4096)

        self.assertEqual(keys.client_key, SHA1_SUITE.hmac(keys.salted_password, b"Client Key"))
        self.assertEqual(keys.stored_key, SHA1_SUITE.h(keys.client_key))
        self.assertEqual(keys.server_key, SHA1_SUITE.hmac(keys.salted_password, b"Server Key"))


class TestGenerateNonce(unittest.TestCase):
    """Test nonce generation."""

    def test_default(self):
        nonce = scram_client.generate_nonce()

        self.assertIsInstance(nonce, scram_client.CryptoDatum)
        self.assertEqual(len(nonce), scram_client.SCRAM_NONCE_SIZE)

    def test_randomness(self):
        self.assertNotEqual(scram_client.generate_nonce(), scram_client.generate_nonce())

    def test_injected_provider(self):
        nonce = scram_client.generate_nonce(18, lambda n: b"\x00" * n)

        self.assertEqual(nonce, b"\x00" * 18)

    def test_provider_wrong_length(self):
        with self.assertRaises(ValueError):
            scram_client.generate_nonce(24, lambda n: b"\x00" * 8)

    def test_invalid_size(self):
        with self.assertRaises(ValueError):
            scram_client.generate_nonce(0)


class TestCryptoDatum(unittest.TestCase):
    """Test CryptoDatum class."""

    def test_creation(self):
        datum = scram_client.CryptoDatum(b"test_data")

        self.assertEqual(bytes(datum), b"test_data")
        self.assertEqual(len(datum), 9)

    def test_repr_hides_contents(self):
        datum = scram_client.CryptoDatum(b"secret")

        self.assertIn("CryptoDatum", repr(datum))
        self.assertNotIn("secret", repr(datum))


if __name__ == '__main__':
    unittest.main()
