import os
import io
import sys
import select
import logging


logger = logging.getLogger("pysurvey")

CHUNK_SIZE = 8192


class ByteReader:
    """A buffered reader of bytes, shared by consecutive prompts.

    Reading happens in chunks, so bytes that arrive together (e.g. a
    pasted answer, or a complete escape sequence) end up in our own
    buffer. Handing the same reader to each prompt makes sure such bytes
    are not lost between prompts.

    The given file can be a binary stream, or a text stream that has a
    binary ``buffer`` (like ``sys.stdin``). An in-memory text stream is
    read as UTF-8.
    """

    def __init__(self, file):
        self._file = getattr(file, "buffer", file)
        self._buffer = bytearray()
        self._eof = False
        try:
            self._fd = self._file.fileno()
        except (AttributeError, OSError, ValueError):
            self._fd = None  # e.g. io.BytesIO

    @property
    def file(self):
        return self._file

    def fileno(self):
        if self._fd is None:
            raise io.UnsupportedOperation("ByteReader has no file descriptor")
        return self._fd

    def isatty(self):
        if self._fd is None:
            return False
        try:
            return os.isatty(self._fd)
        except OSError:
            return False

    def has_pending(self):
        """Whether a byte can be read without blocking."""
        if self._buffer:
            return True
        elif self._eof:
            return False
        elif self._fd is None:
            # In-memory streams never block
            return self._fill()
        elif sys.platform.startswith("win"):
            import msvcrt

            if self.isatty():
                return msvcrt.kbhit() and self._fill()
            return False
        else:
            readable, _, _ = select.select([self._fd], [], [], 0)
            return bool(readable) and self._fill()

    def read_byte(self, block=True):
        """Read a single byte and return it as an int.

        With ``block`` False, None is returned if no byte is immediately
        available. Otherwise, this blocks, and raises ``EOFError`` when the
        stream is exhausted.
        """
        if not self._buffer:
            if not block:
                if not self.has_pending():
                    return None
            elif not self._fill():
                raise EOFError("end of input")
        b = self._buffer[0]
        del self._buffer[0]
        return b

    def readline(self):
        """Read a line of text, including the trailing newline if present.

        Returns an empty string at the end of the stream.
        """
        while b"\n" not in self._buffer:
            if not self._fill():
                break
        i = self._buffer.find(b"\n")
        n = len(self._buffer) if i < 0 else i + 1
        line = bytes(self._buffer[:n])
        del self._buffer[:n]
        return line.decode("utf-8", errors="replace")

    def _fill(self):
        """Read one chunk into the buffer. Returns False at EOF."""
        if self._eof:
            return False
        read1 = getattr(self._file, "read1", None)
        if read1 is not None:
            bb = read1(CHUNK_SIZE)
        elif self._fd is not None:
            bb = os.read(self._fd, CHUNK_SIZE)
        else:
            bb = self._file.read(CHUNK_SIZE)
            if isinstance(bb, str):
                bb = bb.encode()  # e.g. io.StringIO
        if not bb:
            self._eof = True
            logger.debug("input stream reached EOF")
            return False
        self._buffer.extend(bb)
        return True
