# filename: huffman_core.py

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Optional

BITS_PER_WORD = 8
BITS_PER_INT = 32
ALPH_SIZE = 1 << BITS_PER_WORD
PSEUDO_EOF = ALPH_SIZE
HUFF_NUMBER = 0xface8200
HUFF_TREE = HUFF_NUMBER | 1

# a tree over ALPH_SIZE + 1 leaves has at most ALPH_SIZE internal levels
MAX_TREE_DEPTH = ALPH_SIZE


class HuffException(Exception):
    pass


class MalformedStreamError(HuffException):
    pass


class MalformedHeaderError(HuffException):
    pass


class UnsupportedInputError(HuffException):
    pass


@dataclass(frozen=True)
class HuffmanNode:
    value: int
    weight: int = field(default=0, compare=False)
    left: Optional["HuffmanNode"] = None
    right: Optional["HuffmanNode"] = None

    def is_leaf(self):
        return self.left is None and self.right is None


class HuffmanLogic:
    def read_for_counts(self, bit_in):
        # one extra slot for PSEUDO_EOF
        counts = [0] * (ALPH_SIZE + 1)
        while True:
            value = bit_in.read_bits(BITS_PER_WORD)
            if value == -1:
                break
            counts[value] += 1
        counts[PSEUDO_EOF] = 1
        return counts

    def build_tree(self, counts):
        # Ties are broken by insertion order: leaves in symbol order, then
        # merged nodes in the order they were created.
        order = itertools.count()
        priority_queue = [
            (freq, next(order), HuffmanNode(symbol, freq))
            for symbol, freq in enumerate(counts) if freq > 0
        ]
        heapq.heapify(priority_queue)

        while len(priority_queue) > 1:
            _, _, left = heapq.heappop(priority_queue)
            _, _, right = heapq.heappop(priority_queue)
            merged = HuffmanNode(0, left.weight + right.weight, left, right)
            heapq.heappush(priority_queue, (merged.weight, next(order), merged))

        return priority_queue[0][2]

    def generate_codes(self, node, current_code="", codes=None):
        """Map every leaf symbol under ``node`` to its root-to-leaf path of '0'/'1'."""
        if codes is None:
            codes = {}
        if node.is_leaf():
            codes[node.value] = current_code
            return codes
        self.generate_codes(node.left, current_code + "0", codes)
        self.generate_codes(node.right, current_code + "1", codes)
        return codes

    def write_header(self, node, bit_out):
        if node.is_leaf():
            bit_out.write_bits(1, 1)
            bit_out.write_bits(BITS_PER_WORD + 1, node.value)
            return
        bit_out.write_bits(1, 0)
        self.write_header(node.left, bit_out)
        self.write_header(node.right, bit_out)

    def read_header(self, bit_in, depth=0):
        if depth > MAX_TREE_DEPTH:
            raise MalformedHeaderError(f"tree header nests deeper than {MAX_TREE_DEPTH} levels")

        bit = bit_in.read_bits(1)
        if bit == -1:
            raise MalformedHeaderError("tree header ended before the tree was complete")

        if bit == 0:
            left = self.read_header(bit_in, depth + 1)
            right = self.read_header(bit_in, depth + 1)
            return HuffmanNode(0, 0, left, right)

        value = bit_in.read_bits(BITS_PER_WORD + 1)
        if value == -1:
            raise MalformedHeaderError("tree header ended inside a leaf value")
        if value > PSEUDO_EOF:
            raise MalformedHeaderError(f"leaf value {value} is outside the symbol range")
        return HuffmanNode(value)
