"""
One-directional byte channel with fixed-width integer framing.

A channel is an OS pipe seen through two handles. Every message is exactly one
signed 32-bit word in native byte order: no header, no tag, no length prefix.
Writes of one word are below PIPE_BUF, so the kernel transfers them atomically
and a reader never sees half a message from a well-behaved writer.

    read_end, write_end = create_channel()
    write_end.send(7)
    write_end.close()
    read_end.receive()   # 7
    read_end.receive()   # None: every writer closed, end of stream
"""

from __future__ import annotations

import logging
import os
import struct
from collections.abc import Iterator

from .exceptions import ChannelCreationError, ReceiveFault, SendFailure

_WORD = struct.Struct("=i")

WORD_SIZE = _WORD.size


def encode_word(value: int) -> bytes:
    """
    Frame one integer as a message.

    Raises:
        SendFailure: If the value does not fit the wire width
    """
    try:
        return _WORD.pack(value)
    except struct.error as e:
        raise SendFailure("value does not fit one word", value=value) from e


def decode_word(data: bytes) -> int:
    """
    Unframe one message.

    Raises:
        ReceiveFault: If data is not exactly one word
    """
    if len(data) != WORD_SIZE:
        raise ReceiveFault("partial word", expected=WORD_SIZE, got=len(data))
    return _WORD.unpack(data)[0]


class _Endpoint:
    """Owns one pipe descriptor; closed exactly once per holder."""

    role = "endpoint"

    def __init__(self, fd: int) -> None:
        self._fd: int | None = fd

    @property
    def fd(self) -> int:
        if self._fd is None:
            raise ValueError(f"{self.role} is closed")
        return self._fd

    @property
    def closed(self) -> bool:
        return self._fd is None

    def close(self) -> None:
        """
        Release this holder's copy of the descriptor.

        Raises:
            ValueError: If already closed
        """
        fd = self.fd
        self._fd = None
        os.close(fd)

    def __enter__(self) -> _Endpoint:
        return self

    def __exit__(self, *args: object) -> None:
        if not self.closed:
            self.close()

    def __repr__(self) -> str:
        state = "closed" if self._fd is None else f"fd={self._fd}"
        return f"<{self.__class__.__name__} {state}>"


class WriteEnd(_Endpoint):
    """Sending side of a channel."""

    role = "write end"

    def send(self, value: int) -> None:
        """
        Send one message, blocking while the pipe is full.

        Raises:
            SendFailure: On a short write, a broken pipe or an unframeable value
        """
        data = encode_word(value)
        try:
            written = os.write(self.fd, data)
        except OSError as e:
            raise SendFailure("write failed", value=value, error=e.strerror) from e
        if written != WORD_SIZE:
            raise SendFailure("short write", value=value, written=written)


class ReadEnd(_Endpoint):
    """
    Receiving side of a channel.

    Iterating a ReadEnd yields values until end of stream.
    """

    role = "read end"

    def __init__(self, fd: int, lg: logging.Logger | None = None) -> None:
        super().__init__(fd)
        self.lg = lg
        self.fault: ReceiveFault | None = None

    def receive(self) -> int | None:
        """
        Receive one message, blocking while the pipe is empty and open.

        Returns:
            The value, or None once every writer has closed. A transport error
            or partial word is recorded in ``fault`` and also returns None.
        """
        try:
            data = os.read(self.fd, WORD_SIZE)
        except OSError as e:
            return self._fault(ReceiveFault("read failed", error=e.strerror))

        if not data:
            return None
        try:
            return decode_word(data)
        except ReceiveFault as e:
            return self._fault(e)

    def _fault(self, fault: ReceiveFault) -> None:
        self.fault = fault
        if self.lg is not None:
            self.lg.error("receive fault, treating as end of stream", extra={"exception": fault})
        return None

    def __iter__(self) -> Iterator[int]:
        while True:
            value = self.receive()
            if value is None:
                return
            yield value


def create_channel() -> tuple[ReadEnd, WriteEnd]:
    """
    Allocate a new channel.

    Returns:
        (read_end, write_end)

    Raises:
        ChannelCreationError: If the pipe cannot be created
    """
    try:
        read_fd, write_fd = os.pipe()
    except OSError as e:
        raise ChannelCreationError("cannot create pipe", error=e.strerror) from e
    return ReadEnd(read_fd), WriteEnd(write_fd)
