"""
Output sink for the phpcore engine.

The sink is the engine's only connection to the host I/O layer. Writes are
unbuffered and best effort: a failing write is reported through its return
value and never retried.
"""

import io
import logging
import sys
from enum import Enum
from typing import BinaryIO, Dict, Optional, Union


logger = logging.getLogger(__name__)


class StreamId(Enum):
    STDOUT = 1
    STDERR = 2


class OutputSink:
    """
    Writes engine output to a pair of binary streams.

    Text passed as ``str`` is encoded with ``encoding``; bytes are written as is.
    """

    def __init__(self, stdout: Optional[BinaryIO] = None,
                 stderr: Optional[BinaryIO] = None,
                 encoding: str = "utf-8"):
        self.streams: Dict[StreamId, BinaryIO] = {
            StreamId.STDOUT: stdout if stdout is not None else sys.stdout.buffer,
            StreamId.STDERR: stderr if stderr is not None else sys.stderr.buffer,
        }
        self.encoding = encoding

    def _encode(self, data: Union[str, bytes]) -> bytes:
        if isinstance(data, str):
            # Source bytes decoded with surrogateescape come back out unchanged
            try:
                return data.encode(self.encoding, errors="surrogateescape")
            except UnicodeEncodeError:
                return data.encode(self.encoding, errors="replace")
        return bytes(data)

    def write(self, stream_id: StreamId, data: Union[str, bytes]) -> int:
        """
        Write ``data`` to a stream in a single pass.

        Returns the number of bytes written, or -1 if the stream failed.
        """
        payload = self._encode(data)
        if not payload:
            return 0
        stream = self.streams[stream_id]
        try:
            written = stream.write(payload)
            stream.flush()
        except (OSError, ValueError) as e:
            logger.debug("write to %s failed: %s", stream_id.name, e)
            return -1
        return len(payload) if written is None else written

    # Helpers for the standard output stream

    def output(self, text: Union[str, bytes, None]) -> None:
        if text is None:
            return
        self.write(StreamId.STDOUT, text)

    def output_len(self, text: Union[str, bytes, None], length: int) -> None:
        if text is None:
            return
        self.write(StreamId.STDOUT, self._encode(text)[:max(0, length)])

    def output_int(self, value: int) -> None:
        self.output(str(int(value)))

    def output_float(self, value: float) -> None:
        self.output(format_float(value))

    def output_bool(self, value: bool) -> None:
        self.output("1" if value else "")

    def error(self, text: Union[str, bytes, None]) -> None:
        if text is None:
            return
        self.write(StreamId.STDERR, text)


class BufferSink(OutputSink):
    """An OutputSink that captures both streams in memory."""

    def __init__(self, encoding: str = "utf-8"):
        super().__init__(io.BytesIO(), io.BytesIO(), encoding)

    @property
    def stdout_bytes(self) -> bytes:
        return self.streams[StreamId.STDOUT].getvalue()

    @property
    def stderr_bytes(self) -> bytes:
        return self.streams[StreamId.STDERR].getvalue()

    @property
    def stdout_text(self) -> str:
        return self.stdout_bytes.decode(self.encoding, errors="replace")

    @property
    def stderr_text(self) -> str:
        return self.stderr_bytes.decode(self.encoding, errors="replace")

    def reset(self) -> None:
        for stream_id in StreamId:
            self.streams[stream_id] = io.BytesIO()


def format_float(value: float) -> str:
    """Render a float with 6 significant digits, like C's %.6g."""
    return "%.6g" % value
