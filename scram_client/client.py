# SPDX-License-Identifier: LGPL-3.0-or-later
# Polling adapter for SASL drivers that check for errors after the loop

from collections.abc import Callable
from ssl import RAND_bytes

from .common import ScramConfig
from .conversation import ScramConversation
from .error import ScramError
from .method import Method


__all__ = ['ScramClient']


class ScramClient:
    """
    Wraps a `ScramConversation` behind a step / out / err interface.

    `step()` never raises SCRAM errors. It returns True while the server is
    expected to send more data and False once the conversation has finished,
    whether it succeeded or not::

        client = ScramClient(new_method('SCRAM-SHA-1'), user, password)
        server_data = b''
        while client.step(server_data):
            server_data = transport.exchange(client.out)

        if client.err is not None:
            raise AuthenticationFailed(client.err)

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
        self.__conversation = ScramConversation(method, username, password, config=config, rand_bytes=rand_bytes)
        self.__err = None

    @property
    def conversation(self) -> ScramConversation:
        return self.__conversation

    @property
    def out(self) -> bytes:
        """ The data to be sent to the server in the current step. """
        return self.__conversation.out

    @property
    def err(self) -> ScramError | None:
        """ The error that occurred, or None if there were no errors. """
        return self.__err

    def step(self, in_data: bytes = b'') -> bool:
        """
        Process incoming data from the server and make the next round of data
        for the server available via `out`.

        Returns:
            True if more data is expected from the server, False when the
            conversation is over. Check `err` to tell success from failure.
        """
        try:
            _, more = self.__conversation.step(in_data)
        except ScramError as e:
            self.__err = e
            return False

        return more
