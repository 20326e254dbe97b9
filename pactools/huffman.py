"""Huffman code trees over byte values, with bit-stream serialisation."""

from __future__ import annotations

from bisect import bisect_right
from collections import Counter
from collections.abc import Iterator
from dataclasses import dataclass

from .bitstream import BitReader, BitWriter


@dataclass(eq=False)
class Node:
    """A tree node: a leaf carrying a byte value, or a branch with two children."""

    value: int = 0
    weight: int = 0
    left: Node | None = None
    right: Node | None = None
    is_leaf: bool = False


@dataclass(frozen=True)
class LookupEntry:
    """The code of one byte value: its bit pattern, length and weight."""

    pattern: int
    length: int
    weight: int


class NodeCursor:
    """Walks a tree from the root towards a leaf."""

    def __init__(self, node: Node) -> None:
        self._node = node

    def is_leaf(self) -> bool:
        return self._node.is_leaf

    def value(self) -> int:
        """Byte value of the current node."""
        return self._node.value

    def move_left(self) -> None:
        self._node = self._child(self._node.left)

    def move_right(self) -> None:
        self._node = self._child(self._node.right)

    def increase_weight(self) -> None:
        self._node.weight += 1

    @staticmethod
    def _child(child: Node | None) -> Node:
        if child is None:
            raise ValueError("cannot move below a leaf")
        return child


class HuffmanTree:
    """A Huffman tree built from byte frequencies or read from a bit stream."""

    def __init__(self) -> None:
        self.root: Node | None = None

    def _require_root(self) -> Node:
        if self.root is None:
            raise ValueError("the tree is empty")
        return self.root

    def _nodes(self) -> Iterator[tuple[Node, int]]:
        """Yield every node in pre-order together with its depth."""
        if self.root is None:
            return
        stack = [(self.root, 0)]
        while stack:
            node, depth = stack.pop()
            yield node, depth
            if node.right is not None:
                stack.append((node.right, depth + 1))
            if node.left is not None:
                stack.append((node.left, depth + 1))

    def create(self, data: bytes | bytearray | memoryview) -> None:
        """Build the tree from the byte frequencies of ``data``."""
        counts = Counter(bytes(data))
        if not counts:
            raise ValueError("cannot build a Huffman tree from empty data")

        nodes = [
            Node(value=value, weight=weight, is_leaf=True)
            for value, weight in sorted(counts.items())
        ]
        nodes.sort(key=lambda node: node.weight)

        while len(nodes) > 1:
            left = nodes.pop(0)
            right = nodes.pop(0)
            parent = Node(left=left, right=right, weight=left.weight + right.weight)
            index = bisect_right(nodes, parent.weight, key=lambda node: node.weight)
            nodes.insert(index, parent)

        self.root = nodes[0]

    def read(self, reader: BitReader) -> None:
        """Replace the tree with one read from ``reader``."""

        def make_node() -> Node:
            if reader.read_bit():
                return Node()
            return Node(value=reader.read_byte(), is_leaf=True)

        root = make_node()
        pending = [] if root.is_leaf else [root]
        while pending:
            parent = pending[-1]
            child = make_node()
            if parent.left is None:
                parent.left = child
            else:
                parent.right = child
                pending.pop()
            if not child.is_leaf:
                pending.append(child)
        self.root = root

    def write(self, writer: BitWriter) -> None:
        """Serialise the tree shape and leaf values to ``writer``."""
        self._require_root()
        for node, _ in self._nodes():
            if node.is_leaf:
                writer.write_bit(False)
                writer.write_bits(node.value, 8)
            else:
                writer.write_bit(True)

    def lookup(self) -> dict[int, LookupEntry]:
        """Return the code of every byte value present in the tree."""
        root = self._require_root()
        table: dict[int, LookupEntry] = {}
        stack = [(root, 0, 0)]
        while stack:
            node, pattern, length = stack.pop()
            if node.is_leaf:
                table[node.value] = LookupEntry(pattern, length, node.weight)
                continue
            if node.left is None or node.right is None:
                raise ValueError("branch node is missing a child")
            stack.append((node.right, pattern << 1 | 1, length + 1))
            stack.append((node.left, pattern << 1, length + 1))
        return table

    def recalculate_weights(self) -> None:
        """Set every branch weight to the sum of its children's weights."""
        for node, _ in reversed(list(self._nodes())):
            if node.is_leaf:
                continue
            node.weight = sum(
                child.weight for child in (node.left, node.right) if child is not None
            )

    def reset_weights(self) -> None:
        """Set the weight of every node to zero."""
        for node, _ in self._nodes():
            node.weight = 0

    def node_count(self) -> tuple[int, int]:
        """Return ``(branches, leaves)``."""
        self._require_root()
        branches = leaves = 0
        for node, _ in self._nodes():
            if node.is_leaf:
                leaves += 1
            else:
                branches += 1
        return branches, leaves

    def measure(self) -> tuple[int, int]:
        """Return ``(tree_bits, data_bits)`` needed to store the tree and its data."""
        self._require_root()
        tree_bits = data_bits = 0
        for node, depth in self._nodes():
            if node.is_leaf:
                tree_bits += 9
                data_bits += depth * node.weight
            else:
                tree_bits += 1
        return tree_bits, data_bits

    def bit_count(self) -> int:
        """Total bits needed to store the tree followed by the encoded data."""
        return sum(self.measure())

    def cursor(self) -> NodeCursor:
        """Return a cursor positioned at the root."""
        return NodeCursor(self._require_root())