"""Block-wise Huffman compression in the PAC chunk format.

A compressed stream starts with a little-endian header of four 32-bit words
(magic ``0x1234``, block count, block size, header size), followed by one
record of three words per block (decompressed size, compressed size, data
offset) and then the block payloads. Each payload holds the block's Huffman
tree followed by the encoded bytes, most significant bit first.
"""

from __future__ import annotations

import os
import struct
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TypeVar

from .bitstream import BitReader, BitWriter
from .huffman import HuffmanTree

MAGIC = 0x1234

_PREFIX = struct.Struct("<IIII")
_RECORD = struct.Struct("<III")

_T = TypeVar("_T")
_R = TypeVar("_R")


class CompressionError(ValueError):
    """Raised when compressed data is malformed or an operation cannot proceed."""


@dataclass
class Chunk:
    """Sizes and position of one block; ``tree`` is set when compressing."""

    decompressed_size: int
    compressed_size: int
    data_offset: int
    tree: HuffmanTree | None = None


@dataclass
class CompressorInfo:
    """Layout of a compressed stream and the input it describes."""

    data: bytes
    block_size: int
    chunks: list[Chunk] = field(default_factory=list)
    output_size: int = 0

    @property
    def input_size(self) -> int:
        return len(self.data)

    @property
    def header_size(self) -> int:
        return _header_size(len(self.chunks))

    def block_count(self) -> int:
        return len(self.chunks)


def _header_size(block_count: int) -> int:
    return _PREFIX.size + _RECORD.size * block_count


def _worker_count(n_threads: int | None) -> int:
    if n_threads is None or n_threads == 0:
        return os.cpu_count() or 1
    if n_threads < 0:
        raise ValueError(f"thread count must not be negative, got {n_threads}")
    return n_threads


def _run_parallel(
    func: Callable[..., _R], n_threads: int | None, *iterables: Iterable[_T]
) -> list[_R]:
    with ThreadPoolExecutor(max_workers=_worker_count(n_threads)) as pool:
        return list(pool.map(func, *iterables))


def _analyze_block(block: bytes) -> tuple[int, HuffmanTree]:
    tree = HuffmanTree()
    tree.create(block)
    size = 1 + (tree.bit_count() - 1) // 8
    return size, tree


def _bits_of(data: bytes) -> str:
    if not data:
        return ""
    return bin(int.from_bytes(data, "big"))[2:].zfill(len(data) * 8)


def _encode_block(block: bytes, tree: HuffmanTree, size: int) -> bytes:
    writer = BitWriter()
    tree.write(writer)
    offset, bit = writer.tell()
    tree_bits = _bits_of(bytes(writer.buffer))[: offset * 8 + bit]

    codes = {
        value: format(entry.pattern, f"0{entry.length}b") if entry.length else ""
        for value, entry in tree.lookup().items()
    }
    bits = tree_bits + "".join(map(codes.__getitem__, block))
    bits += "0" * (-len(bits) % 8)
    encoded = int(bits, 2).to_bytes(len(bits) // 8, "big")
    return encoded[:size].ljust(size, b"\x00")


def _decode_block(payload: bytes, size: int) -> bytes:
    if size == 0:
        return b""
    tree = HuffmanTree()
    try:
        tree.read(BitReader(payload))
    except EOFError as exc:
        raise CompressionError("block ends inside its Huffman tree") from exc

    root = tree.root
    assert root is not None
    if root.is_leaf:
        return bytes([root.value]) * size

    tree_bits, _ = tree.measure()
    out = bytearray()
    node = root
    for bit in _bits_of(payload)[tree_bits:]:
        child = node.right if bit == "1" else node.left
        if child is None:
            raise CompressionError("malformed Huffman tree")
        node = child
        if node.is_leaf:
            out.append(node.value)
            if len(out) == size:
                return bytes(out)
            node = root
    raise CompressionError(
        f"block data ended after {len(out)} of {size} bytes"
    )


def prepare_compression(
    data: bytes | bytearray | memoryview, block_size: int, n_threads: int | None = None
) -> CompressorInfo:
    """Split ``data`` into blocks, build their trees and compute the output layout."""
    if block_size <= 0:
        raise ValueError(f"block size must be positive, got {block_size}")
    data = bytes(data)
    blocks = [data[start : start + block_size] for start in range(0, len(data), block_size)]
    analyzed = _run_parallel(_analyze_block, n_threads, blocks)

    info = CompressorInfo(data=data, block_size=block_size)
    chunk_offset = 0
    for block, (size, tree) in zip(blocks, analyzed):
        info.chunks.append(Chunk(len(block), size, chunk_offset, tree))
        chunk_offset += size
    info.output_size = info.header_size + chunk_offset
    return info


def compress(info: CompressorInfo, n_threads: int | None = None) -> bytes:
    """Produce the compressed stream described by ``info``."""
    trees = []
    for chunk in info.chunks:
        if chunk.tree is None:
            raise CompressionError("info was not prepared for compression")
        trees.append(chunk.tree)

    header = bytearray(
        _PREFIX.pack(MAGIC, info.block_count(), info.block_size, info.header_size)
    )
    blocks = []
    src_offset = 0
    for chunk in info.chunks:
        header += _RECORD.pack(
            chunk.decompressed_size, chunk.compressed_size, chunk.data_offset
        )
        blocks.append(info.data[src_offset : src_offset + chunk.decompressed_size])
        src_offset += chunk.decompressed_size

    sizes = [chunk.compressed_size for chunk in info.chunks]
    payloads = _run_parallel(_encode_block, n_threads, blocks, trees, sizes)

    output = bytearray(info.output_size)
    output[: len(header)] = header
    for chunk, payload in zip(info.chunks, payloads):
        start = info.header_size + chunk.data_offset
        output[start : start + len(payload)] = payload
    return bytes(output)


def prepare_decompression(data: bytes | bytearray | memoryview) -> CompressorInfo:
    """Parse the header of a compressed stream."""
    data = bytes(data)
    if len(data) < _PREFIX.size:
        raise CompressionError("compressed data is shorter than its header")
    magic, block_count, block_size, header_size = _PREFIX.unpack_from(data)
    if magic != MAGIC:
        raise CompressionError(f"bad magic 0x{magic:X}")
    if header_size != _header_size(block_count):
        raise CompressionError(
            f"header size {header_size} does not match {block_count} blocks"
        )
    if len(data) < header_size:
        raise CompressionError("compressed data is shorter than its header")

    info = CompressorInfo(data=data, block_size=block_size)
    for index in range(block_count):
        dec_size, cmp_size, offset = _RECORD.unpack_from(
            data, _PREFIX.size + index * _RECORD.size
        )
        info.chunks.append(Chunk(dec_size, cmp_size, offset))
    info.output_size = sum(chunk.decompressed_size for chunk in info.chunks)
    return info


def decompress(info: CompressorInfo, n_threads: int | None = None) -> bytes:
    """Decode every block of a parsed stream and return the original bytes."""
    payloads = []
    for chunk in info.chunks:
        start = info.header_size + chunk.data_offset
        payload = info.data[start : start + chunk.compressed_size]
        if len(payload) < chunk.compressed_size:
            raise CompressionError("compressed block is truncated")
        payloads.append(payload)

    sizes = [chunk.decompressed_size for chunk in info.chunks]
    return b"".join(_run_parallel(_decode_block, n_threads, payloads, sizes))