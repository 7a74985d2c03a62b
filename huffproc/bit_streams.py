# filename: bit_streams.py

from bitarray import bitarray
from bitarray.util import ba2int, int2ba

from huffman_core import UnsupportedInputError

# bytes pulled from / pushed to the underlying stream at a time
CHUNK_SIZE = 4096


class BitInputStream:
    """
    Reads fixed-width unsigned integers, most significant bit first, from a
    byte-oriented binary stream.

    read_bits returns -1 once the stream cannot supply the requested number
    of bits, so callers can tell end-of-data apart from a zero value.
    """

    def __init__(self, stream, chunk_size=CHUNK_SIZE):
        self.stream = stream
        self.chunk_size = chunk_size
        self.bits_read = 0
        self._owns_stream = False
        self._buffer = bitarray()
        self._pos = 0

    @classmethod
    def open(cls, path, chunk_size=CHUNK_SIZE):
        bit_in = cls(open(path, 'rb'), chunk_size)
        bit_in._owns_stream = True
        return bit_in

    def _fill(self):
        chunk = self.stream.read(self.chunk_size)
        if not chunk:
            return False
        # drop consumed bits so the buffer stays bounded
        del self._buffer[:self._pos]
        self._pos = 0
        self._buffer.frombytes(chunk)
        return True

    def read_bits(self, num_bits):
        while len(self._buffer) - self._pos < num_bits:
            if not self._fill():
                return -1

        start = self._pos
        self._pos += num_bits
        self.bits_read += num_bits
        if num_bits == 1:
            return self._buffer[start]
        return ba2int(self._buffer[start:self._pos])

    def can_reset(self):
        seekable = getattr(self.stream, 'seekable', None)
        return bool(seekable and seekable())

    def reset(self):
        if not self.can_reset():
            raise UnsupportedInputError("input stream cannot be rewound")
        self.stream.seek(0)
        self._buffer = bitarray()
        self._pos = 0

    def close(self):
        if self._owns_stream:
            self.stream.close()


class BitOutputStream:
    """
    Writes fixed-width unsigned integers, most significant bit first, to a
    byte-oriented binary stream. close() pads the last partial byte with
    zero bits.
    """

    def __init__(self, stream, chunk_size=CHUNK_SIZE):
        self.stream = stream
        self.chunk_size = chunk_size
        self.bits_written = 0
        self._owns_stream = False
        self._buffer = bitarray()

    @classmethod
    def open(cls, path, chunk_size=CHUNK_SIZE):
        bit_out = cls(open(path, 'wb'), chunk_size)
        bit_out._owns_stream = True
        return bit_out

    def write_bits(self, num_bits, value):
        if num_bits <= 0:
            return
        self._buffer.extend(int2ba(value & ((1 << num_bits) - 1), length=num_bits))
        self.bits_written += num_bits
        if len(self._buffer) >= 8 * self.chunk_size:
            self.flush()

    def flush(self):
        whole = len(self._buffer) - len(self._buffer) % 8
        if whole:
            self.stream.write(self._buffer[:whole].tobytes())
            del self._buffer[:whole]
        self.stream.flush()

    def close(self):
        if len(self._buffer):
            # tobytes() pads the trailing partial byte with zeros
            self.stream.write(self._buffer.tobytes())
            self._buffer = bitarray()
        self.stream.flush()
        if self._owns_stream:
            self.stream.close()
