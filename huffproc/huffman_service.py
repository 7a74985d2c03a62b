# filename: huffman_service.py

import io
import logging

from bit_streams import BitInputStream, BitOutputStream
from huffman_core import (
    BITS_PER_INT,
    BITS_PER_WORD,
    HUFF_TREE,
    PSEUDO_EOF,
    HuffmanLogic,
    MalformedStreamError,
    UnsupportedInputError,
)

DEBUG_LOW = 1
DEBUG_HIGH = 4

logger = logging.getLogger(__name__)


class HuffmanService:
    def __init__(self, debug=0):
        self.logic = HuffmanLogic()
        self.debug = debug

    def compress(self, data):
        bit_out = BitOutputStream(io.BytesIO())
        self.compress_stream(BitInputStream(io.BytesIO(data)), bit_out)
        return bit_out.stream.getvalue()

    def decompress(self, data):
        bit_out = BitOutputStream(io.BytesIO())
        self.decompress_stream(BitInputStream(io.BytesIO(data)), bit_out)
        return bit_out.stream.getvalue()

    def compress_stream(self, bit_in, bit_out):
        """
        Compresses everything readable from bit_in into bit_out.

        The input is read twice (once for counts, once to encode), so it must
        support reset(). bit_out is closed on success. Returns the number of
        bits written.
        """
        if not bit_in.can_reset():
            raise UnsupportedInputError("compression needs an input that can be rewound")

        counts = self.logic.read_for_counts(bit_in)
        root = self.logic.build_tree(counts)
        codings = self.logic.generate_codes(root)
        if self.debug >= DEBUG_HIGH:
            for symbol in sorted(codings):
                logger.debug("symbol %d count %d code %s", symbol, counts[symbol], codings[symbol])

        bit_out.write_bits(BITS_PER_INT, HUFF_TREE)
        self.logic.write_header(root, bit_out)
        header_bits = bit_out.bits_written

        bit_in.reset()
        self._write_compressed_bits(codings, bit_in, bit_out)
        bit_out.close()

        if self.debug >= DEBUG_LOW:
            logger.debug(
                "compressed %d symbols (%d distinct) into %d bits, header %d bits",
                sum(counts) - 1, len(codings) - 1, bit_out.bits_written, header_bits,
            )
        return bit_out.bits_written

    def _write_compressed_bits(self, codings, bit_in, bit_out):
        while True:
            value = bit_in.read_bits(BITS_PER_WORD)
            if value == -1:
                break
            self._write_code(codings[value], bit_out)
        self._write_code(codings[PSEUDO_EOF], bit_out)

    def _write_code(self, code, bit_out):
        # a one-leaf tree gives its symbol the empty code
        if code:
            bit_out.write_bits(len(code), int(code, 2))

    def decompress_stream(self, bit_in, bit_out):
        """
        Decompresses a tree-framed stream from bit_in into bit_out.

        Raises MalformedStreamError on a foreign magic number or when the data
        ends before the end-of-stream code, and MalformedHeaderError on a bad
        tree header. bit_out is closed on success. Returns the number of bits
        read.
        """
        magic = bit_in.read_bits(BITS_PER_INT)
        if magic != HUFF_TREE:
            raise MalformedStreamError(f"illegal header starts with {magic}")

        root = self.logic.read_header(bit_in)
        written = self._read_compressed_bits(root, bit_in, bit_out)
        bit_out.close()

        if self.debug >= DEBUG_LOW:
            logger.debug("decompressed %d bits into %d bytes", bit_in.bits_read, written)
        return bit_in.bits_read

    def _read_compressed_bits(self, root, bit_in, bit_out):
        if root.is_leaf():
            if root.value != PSEUDO_EOF:
                raise MalformedStreamError(f"tree holds only symbol {root.value} and no end-of-stream leaf")
            return 0

        written = 0
        current = root
        while True:
            bit = bit_in.read_bits(1)
            if bit == -1:
                raise MalformedStreamError("compressed data ended before the end-of-stream code")
            current = current.left if bit == 0 else current.right
            if current.is_leaf():
                if current.value == PSEUDO_EOF:
                    return written
                bit_out.write_bits(BITS_PER_WORD, current.value)
                written += 1
                current = root
