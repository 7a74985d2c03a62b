#!/usr/bin/env python3
"""
Huffman compression tool (tree-framed format).

Usage:
    Compress:   huffproc compress input.bin output.hf
    Decompress: huffproc decompress input.hf output.bin
    Diagnostics: huffproc --debug 4 compress input.bin output.hf
"""

import argparse
import logging
import os
import sys

from bit_streams import BitInputStream, BitOutputStream
from huffman_core import HuffException
from huffman_service import DEBUG_LOW, HuffmanService


def _run(service, mode, input_file, output_file):
    bit_in = BitInputStream.open(input_file)
    try:
        bit_out = BitOutputStream.open(output_file)
        try:
            if mode == 'compress':
                service.compress_stream(bit_in, bit_out)
            else:
                service.decompress_stream(bit_in, bit_out)
        except BaseException:
            bit_out.stream.close()
            os.remove(output_file)
            raise
    finally:
        bit_in.close()


def main(argv=None):
    parser = argparse.ArgumentParser(description='Huffman compression with a tree header')
    parser.add_argument('--debug', type=int, default=0,
                        help='diagnostic level: 1 for summaries, 4 for per-symbol codes')
    parser.add_argument('-v', '--verbose', action='store_true', help='same as --debug 1')
    sub = parser.add_subparsers(dest='mode', required=True)

    for mode in ('compress', 'decompress'):
        p = sub.add_parser(mode)
        p.add_argument('input')
        p.add_argument('output')

    args = parser.parse_args(argv)

    debug = max(args.debug, DEBUG_LOW if args.verbose else 0)
    if debug:
        logging.basicConfig(level=logging.DEBUG, format='%(name)s: %(message)s')

    service = HuffmanService(debug)
    try:
        _run(service, args.mode, args.input, args.output)
    except (HuffException, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    verb = 'Compressed' if args.mode == 'compress' else 'Decompressed'
    print(f"{verb}: {args.input} -> {args.output}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
