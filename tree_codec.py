import huffman
from bitio import BitReader, BitWriter


def serialize_tree(node: huffman.HuffmanNode, writer: BitWriter) -> int:
    """
    Pre-order: a branch is bit 1 then its left and right subtrees,
    a leaf is bit 0 then its symbol as 8 bits
    Returns the number of bits written
    """
    start = writer.bits_written
    stack = [node]
    while stack:
        current = stack.pop()
        if current.is_leaf():
            writer.write_bit(False)
            writer.write_byte(current.symbol)
        else:
            writer.write_bit(True)
            stack.append(current.right) # right is popped after the whole left subtree
            stack.append(current.left)
    return writer.bits_written - start


def deserialize_tree(reader: BitReader) -> huffman.HuffmanNode:
    """
    Rebuilds a tree written by serialize_tree. Frequencies are not stored,
    so every node comes back with frequency 0.
    Raises EOFError if the stream ends inside the tree and ValueError if a
    symbol appears in more than one leaf.
    """
    seen = set()

    def read_node(depth):
        if depth > 256:
            raise ValueError("tree is deeper than any 256-symbol tree")
        if reader.read_bit():
            branch = huffman.HuffmanNode(None, 0)
            branch.left = read_node(depth + 1)
            branch.right = read_node(depth + 1)
            return branch

        symbol = reader.read_byte()
        if symbol in seen:
            raise ValueError(f"symbol {symbol} appears twice in the tree")
        seen.add(symbol)
        return huffman.HuffmanNode(symbol, 0)

    return read_node(0)
