# SPDX-License-Identifier: LGPL-3.0-or-later
"""Test the ScramClient step / out / err interface.

ScramClient wraps a conversation for SASL drivers that loop on `step()` and
inspect `err` afterwards.
"""

import unittest
from base64 import b64decode

import scram_client
from scram_client import ConversationState, ScramClient, ScramConfig, new_method

from scram_server import ScramTestServer


def rfc5802_nonce(size):
    return b64decode("fyko+d2lbbFgONRv9qkxdawL")


def drive(client, server):
    """Run the polling loop the way a SASL driver would."""
    server_data = b""
    rounds = 0
    while client.step(server_data):
        rounds += 1
        if rounds == 1:
            server_data = server.handle_client_first(client.out)
        else:
            server_data = server.handle_client_final(client.out)

    return rounds


class TestScramClientSuccess(unittest.TestCase):
    """Test successful authentication through the polling interface."""

    def test_rfc5802_exchange(self):
        """Test the RFC 5802 example through step / out."""
        client = ScramClient(
            new_method("SCRAM-SHA-1"), "user", "pencil",
            config=ScramConfig(nonce_size=18), rand_bytes=rfc5802_nonce,
        )

        self.assertTrue(client.step(b""))
        self.assertEqual(client.out, b"n,,n=user,r=fyko+d2lbbFgONRv9qkxdawL")

        self.assertTrue(client.step(
            b"r=fyko+d2lbbFgONRv9qkxdawL3rfcNHYJY1ZVvWVs7j,s=QSXCR+Q6sek8bf92,i=4096"
        ))
        self.assertEqual(
            client.out,
            b"c=biws,r=fyko+d2lbbFgONRv9qkxdawL3rfcNHYJY1ZVvWVs7j,p=v0X8v3Bz2T0CJGbJQyF0X+HI4Ts="
        )

        self.assertFalse(client.step(b"v=rmF9pqV8S7suAoZWja4dJRkFsKQ="))
        self.assertIsNone(client.err)
        self.assertEqual(client.out, b"")
        self.assertTrue(client.conversation.done)

    def test_driver_loop(self):
        """Test that a driver loop finishes after two server messages for both mechanisms."""
        for name, suite in (("SCRAM-SHA-1", scram_client.SHA1_SUITE), ("SCRAM-SHA-256", scram_client.SHA256_SUITE)):
            with self.subTest(mechanism=name):
                client = ScramClient(new_method(name), "user", "pencil")

                self.assertEqual(drive(client, ScramTestServer(suite=suite)), 2)
                self.assertIsNone(client.err)
                self.assertEqual(client.conversation.state, ConversationState.DONE)


class TestScramClientFailure(unittest.TestCase):
    """Test that failures end the loop and are reported through err."""

    def test_wrong_password(self):
        """Test that a server rejection ends the loop with err set."""
        client = ScramClient(new_method("SCRAM-SHA-256"), "user", "guess")

        drive(client, ScramTestServer(suite=scram_client.SHA256_SUITE))

        self.assertIsInstance(client.err, scram_client.ServerRejected)
        self.assertEqual(client.err.reason, "invalid-proof")
        self.assertEqual(client.out, b"")
        self.assertFalse(client.conversation.valid)

    def test_malformed_server_first(self):
        """Test that a parse failure is reported rather than raised."""
        client = ScramClient(new_method("SCRAM-SHA-1"), "user", "pencil")
        client.step(b"")

        self.assertFalse(client.step(b"not a scram message"))
        self.assertIsInstance(client.err, scram_client.ProtocolError)
        self.assertIs(client.err, client.conversation.error)

    def test_invalid_method(self):
        """Test that setup errors surface on the first step."""
        client = ScramClient("SCRAM-SHA-512", "user", "pencil")  # type: ignore

        self.assertFalse(client.step(b""))
        self.assertEqual(client.err.code, scram_client.SCRAM_E_INVALID_REQUEST)

    def test_step_after_completion(self):
        """Test that stepping a finished client reports reuse."""
        client = ScramClient(new_method("SCRAM-SHA-256"), "user", "pencil")
        drive(client, ScramTestServer(suite=scram_client.SHA256_SUITE))
        self.assertIsNone(client.err)

        self.assertFalse(client.step(b"v=AAAA"))
        self.assertIsInstance(client.err, scram_client.ConversationReused)
        self.assertTrue(client.conversation.done)

    def test_non_bytes_input_raises(self):
        """Test that passing text is a programming error, not a SCRAM failure."""
        client = ScramClient(new_method("SCRAM-SHA-256"), "user", "pencil")

        with self.assertRaises(TypeError):
            client.step("")  # type: ignore

        self.assertIsNone(client.err)


if __name__ == '__main__':
    unittest.main()
