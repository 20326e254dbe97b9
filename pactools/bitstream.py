"""Bit-level readers and writers over byte buffers, most significant bit first."""

from __future__ import annotations

_UINT32_MASK = 0xFFFFFFFF


def _check_position(offset: int, bit: int) -> None:
    if offset < 0:
        raise ValueError(f"byte offset must not be negative, got {offset}")
    if not 0 <= bit <= 8:
        raise ValueError(f"bit position must be between 0 and 8, got {bit}")


class BitWriter:
    """Writes bits MSB-first into a mutable byte buffer, growing it when needed.

    Bytes that are only partly written keep their other bits untouched.
    """

    def __init__(self, buffer: bytearray | None = None) -> None:
        self.buffer = bytearray() if buffer is None else buffer
        self._offset = 0
        self._remaining = 8

    def seek(self, offset: int, bit: int) -> None:
        """Move to ``bit`` (counted from the most significant) of byte ``offset``."""
        _check_position(offset, bit)
        self._offset = offset
        self._remaining = 8 - bit

    def tell(self) -> tuple[int, int]:
        """Return the current position as ``(byte offset, bit)``."""
        return self._offset, 8 - self._remaining

    def write_bit(self, high: bool) -> None:
        """Write a single bit."""
        self._advance_if_full()
        self._remaining -= 1
        self._ensure(self._offset)
        mask = 1 << self._remaining
        if high:
            self.buffer[self._offset] |= mask
        else:
            self.buffer[self._offset] &= ~mask & 0xFF

    def write_bits(self, value: int, n_bits: int) -> None:
        """Write the low ``n_bits`` of ``value`` (at most 32), high bit first."""
        if n_bits < 0:
            raise ValueError(f"bit count must not be negative, got {n_bits}")
        value &= _UINT32_MASK
        n_bits = min(32, n_bits)
        while n_bits > 8:
            n_bits -= 8
            self._write_byte((value >> n_bits) & 0xFF, 8)
        self._write_byte(value & 0xFF, n_bits)

    def _advance_if_full(self) -> None:
        if self._remaining == 0:
            self._offset += 1
            self._remaining = 8

    def _ensure(self, offset: int) -> None:
        missing = offset + 1 - len(self.buffer)
        if missing > 0:
            self.buffer.extend(bytes(missing))

    def _write_byte(self, data: int, n_bits: int) -> None:
        n_bits = min(8, n_bits)
        if n_bits == 0:
            return
        self._advance_if_full()

        first = min(n_bits, self._remaining)
        second = n_bits - first

        mask = (1 << first) - 1
        shift = self._remaining - first
        self._ensure(self._offset)
        current = self.buffer[self._offset] & ~(mask << shift) & 0xFF
        current |= ((data >> second) & mask) << shift
        self.buffer[self._offset] = current
        self._remaining -= first

        if second:
            self._offset += 1
            self._remaining = 8 - second
            mask = (1 << second) - 1
            shift = self._remaining
            self._ensure(self._offset)
            current = self.buffer[self._offset] & ~(mask << shift) & 0xFF
            current |= (data << shift) & (mask << shift) & 0xFF
            self.buffer[self._offset] = current


class BitReader:
    """Reads bits MSB-first from a byte sequence."""

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = data
        self._offset = 0
        self._remaining = 8

    def seek(self, offset: int, bit: int) -> None:
        """Move to ``bit`` (counted from the most significant) of byte ``offset``."""
        _check_position(offset, bit)
        self._offset = offset
        self._remaining = 8 - bit

    def _byte(self, offset: int) -> int:
        if offset >= len(self._data):
            raise EOFError("read past the end of the bit stream")
        return self._data[offset]

    def read_bit(self) -> bool:
        """Read a single bit."""
        if self._remaining == 0:
            self._offset += 1
            self._remaining = 8
        current = self._byte(self._offset)
        self._remaining -= 1
        return (current >> self._remaining) & 1 == 1

    def read_byte(self) -> int:
        """Read the next eight bits as one byte value."""
        if self._remaining == 8:
            value = self._byte(self._offset)
            self._offset += 1
            return value
        if self._remaining == 0:
            value = self._byte(self._offset + 1)
            self._offset += 1
            return value

        first = self._remaining
        second = 8 - first
        high = (self._byte(self._offset) & ((1 << first) - 1)) << second
        low = (self._byte(self._offset + 1) & (((1 << second) - 1) << first)) >> first
        self._offset += 1
        return (high | low) & 0xFF