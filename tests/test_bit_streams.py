import io

import pytest

from bit_streams import BitInputStream, BitOutputStream
from huffman_core import UnsupportedInputError


class _Pipe:
	def __init__(self, data):
		self._data = io.BytesIO(data)

	def read(self, n=-1):
		return self._data.read(n)

	def seekable(self):
		return False


def _written(*writes, chunk_size=4096):
	bit_out = BitOutputStream(io.BytesIO(), chunk_size)
	for num_bits, value in writes:
		bit_out.write_bits(num_bits, value)
	bit_out.close()
	return bit_out.stream.getvalue(), bit_out.bits_written


def test_msb_first_with_zero_padding():
	data, nbits = _written((3, 0b101), (9, 256))
	assert nbits == 12
	assert data == b'\xb0\x00'


def test_write_keeps_only_low_bits():
	data, _ = _written((4, 0x1f), (4, 0))
	assert data == b'\xf0'


def test_zero_width_write_is_noop():
	data, nbits = _written((0, 1), (8, 0x41), (0, 0))
	assert nbits == 8
	assert data == b'A'


def test_small_chunks_flush_whole_bytes():
	writes = [(9, i) for i in range(100)]
	expected, _ = _written(*writes)
	data, _ = _written(*writes, chunk_size=1)
	assert data == expected


def test_read_sequence_and_end_of_data():
	bit_in = BitInputStream(io.BytesIO(b'\xb0\x00'), chunk_size=1)
	assert bit_in.read_bits(3) == 0b101
	assert bit_in.read_bits(9) == 256
	assert bit_in.read_bits(4) == 0
	assert bit_in.bits_read == 16
	assert bit_in.read_bits(1) == -1


def test_read_more_than_available_returns_eof():
	bit_in = BitInputStream(io.BytesIO(b'\xfa\xce'))
	assert bit_in.read_bits(32) == -1


def test_read_32_bits():
	bit_in = BitInputStream(io.BytesIO(b'\xfa\xce\x82\x01'))
	assert bit_in.read_bits(32) == 0xface8201


def test_reset_rewinds():
	bit_in = BitInputStream(io.BytesIO(b'xyz'), chunk_size=2)
	first = [bit_in.read_bits(8) for _ in range(4)]
	bit_in.reset()
	second = [bit_in.read_bits(8) for _ in range(4)]
	assert first == second == [ord('x'), ord('y'), ord('z'), -1]


def test_reset_on_unseekable_stream():
	bit_in = BitInputStream(_Pipe(b'abc'))
	assert not bit_in.can_reset()
	with pytest.raises(UnsupportedInputError):
		bit_in.reset()


def test_open_and_close_files(tmp_path):
	path = tmp_path / 'bits.bin'
	bit_out = BitOutputStream.open(path)
	bit_out.write_bits(12, 0xabc)
	bit_out.close()
	assert bit_out.stream.closed
	assert path.read_bytes() == b'\xab\xc0'

	bit_in = BitInputStream.open(path)
	assert bit_in.can_reset()
	assert bit_in.read_bits(12) == 0xabc
	bit_in.close()
	assert bit_in.stream.closed


def test_close_leaves_borrowed_stream_open():
	buffer = io.BytesIO()
	bit_out = BitOutputStream(buffer)
	bit_out.write_bits(1, 1)
	bit_out.close()
	assert not buffer.closed
	assert buffer.getvalue() == b'\x80'
