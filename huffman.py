import heapq

class HuffmanNode: # Node for Huffman tree
    def __init__(self, symbol, frequency, order=0):
        self.symbol = symbol    # byte or None
        self.frequency = frequency
        self.order = order      # insertion sequence, breaks ties between equal frequencies
        self.left = None
        self.right = None

    def is_leaf(self):
        return self.symbol is not None

    def __lt__(self, other):
        return (self.frequency, self.order) < (other.frequency, other.order) # min-heap on frequency, then insertion order

    def __repr__(self):
        if self.is_leaf():
            return f"Leaf({self.symbol}, {self.frequency})"
        return f"Branch({self.frequency}, {self.left!r}, {self.right!r})"


def freq_table(data): # data: bytes -> dict of symbol -> frequency
    ft = {}
    for b in data:
        ft[b] = ft.get(b, 0) + 1
    return ft

def build_huffman_tree(frequency_table): # frequency_table: dict of symbol -> frequency
    if not frequency_table:
        raise ValueError("cannot build a Huffman tree without symbols")

    # Leaves are seeded in symbol order so the tree is reproducible
    priority_queue = [HuffmanNode(symbol, frequency, order)
                      for order, (symbol, frequency) in enumerate(sorted(frequency_table.items()))]
    heapq.heapify(priority_queue)
    next_order = len(priority_queue)

    # Build the tree
    while len(priority_queue) > 1:
        left = heapq.heappop(priority_queue)
        right = heapq.heappop(priority_queue)
        merged_node = HuffmanNode(None, left.frequency + right.frequency, next_order) # internal node with combined frequency
        next_order += 1
        merged_node.left = left
        merged_node.right = right
        heapq.heappush(priority_queue, merged_node)

    return priority_queue[0] # root of the tree

def generate_huffman_codes(root): # root: root of the Huffman tree
    # A lone leaf has an empty path, give it the 1-bit code 0 instead
    if root.is_leaf():
        return {root.symbol: '0'}

    codes = {}
    def generate_codes_helper(node, current_code):
        if node is None:
            return

        # Leaf node -> assign code
        if node.is_leaf():
            codes[node.symbol] = current_code
            return

        generate_codes_helper(node.left, current_code + '0')
        generate_codes_helper(node.right, current_code + '1')

    generate_codes_helper(root, '')
    return codes # mapping of symbols to their Huffman codes

def code_cost(code_map, frequency_table):
    """
    Total encoded payload length in bits: sum of code length * frequency
    """
    return sum(len(code_map[symbol]) * frequency for symbol, frequency in frequency_table.items())

def encode_bits(data: bytes, code_map: dict) -> str: # data: input bytes, code_map: dict of symbol -> Huffman code
    return ''.join(code_map[byte] for byte in data)

def decode_bits(bitstring: str, root) -> bytes: # bitstring: '0'/'1' string, root: root of the Huffman tree
    decoded_bytes = []

    if root.is_leaf():
        for bit in bitstring:
            if bit != '0':
                raise ValueError("single-symbol stream may only contain 0 bits")
            decoded_bytes.append(root.symbol)
        return bytes(decoded_bytes)

    current_node = root
    for bit in bitstring:
        current_node = current_node.left if bit == '0' else current_node.right
        if current_node.is_leaf(): # reached a leaf
            decoded_bytes.append(current_node.symbol)
            current_node = root # reset to the root for the next symbol

    if current_node is not root:
        raise ValueError("bit string ends in the middle of a code")
    return bytes(decoded_bytes)
