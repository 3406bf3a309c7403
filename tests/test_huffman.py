import heapq
import random

import pytest

import huffman


def reference_cost(ft):
    # Optimal total code length is the sum of every merged weight
    heap = list(ft.values())
    heapq.heapify(heap)
    cost = 0
    while len(heap) > 1:
        a = heapq.heappop(heap)
        b = heapq.heappop(heap)
        cost += a + b
        heapq.heappush(heap, a + b)
    return cost


def check_weights(node):
    if node.is_leaf():
        return node.frequency
    assert node.frequency == check_weights(node.left) + check_weights(node.right)
    return node.frequency


def test_freq_table_counts():
    ft = huffman.freq_table(b"aabcccca")
    assert ft == {ord('a'): 3, ord('b'): 1, ord('c'): 4}
    assert sum(ft.values()) == 8


def test_freq_table_empty():
    assert huffman.freq_table(b"") == {}


def test_build_tree_rejects_empty_table():
    with pytest.raises(ValueError):
        huffman.build_huffman_tree({})


def test_aaabbc_codes():
    ft = huffman.freq_table(b"aaabbc")
    assert ft == {ord('a'): 3, ord('b'): 2, ord('c'): 1}
    codes = huffman.generate_huffman_codes(huffman.build_huffman_tree(ft))
    assert codes == {ord('a'): "0", ord('c'): "10", ord('b'): "11"}
    assert huffman.encode_bits(b"aaabbc", codes) == "000111110"


def test_single_symbol_tree_is_leaf_with_one_bit_code():
    root = huffman.build_huffman_tree({ord('a'): 4})
    assert root.is_leaf()
    assert root.frequency == 4
    assert huffman.generate_huffman_codes(root) == {ord('a'): "0"}


def test_symbol_zero_is_a_leaf():
    root = huffman.build_huffman_tree({0: 1, 1: 1})
    codes = huffman.generate_huffman_codes(root)
    assert set(codes) == {0, 1}


def test_branch_weights_and_unique_leaves():
    data = bytes(random.Random(7).randrange(0, 40) for _ in range(2000))
    ft = huffman.freq_table(data)
    root = huffman.build_huffman_tree(ft)
    assert check_weights(root) == len(data)

    codes = huffman.generate_huffman_codes(root)
    assert set(codes) == set(ft)


def test_tree_is_reproducible():
    ft = {s: 5 for s in range(20)}
    a = huffman.generate_huffman_codes(huffman.build_huffman_tree(ft))
    b = huffman.generate_huffman_codes(huffman.build_huffman_tree(dict(reversed(list(ft.items())))))
    assert a == b


@pytest.mark.parametrize("seed", range(5))
def test_codes_are_prefix_free(seed):
    rng = random.Random(seed)
    ft = {s: rng.randint(1, 1000) for s in rng.sample(range(256), rng.randint(2, 256))}
    codes = list(huffman.generate_huffman_codes(huffman.build_huffman_tree(ft)).values())
    for i, a in enumerate(codes):
        for j, b in enumerate(codes):
            if i != j:
                assert not b.startswith(a)


@pytest.mark.parametrize("seed", range(5))
def test_code_cost_is_optimal(seed):
    rng = random.Random(100 + seed)
    ft = {s: rng.randint(1, 500) for s in rng.sample(range(256), rng.randint(2, 64))}
    codes = huffman.generate_huffman_codes(huffman.build_huffman_tree(ft))
    assert huffman.code_cost(codes, ft) == reference_cost(ft)


def test_decode_bits_roundtrip():
    data = b"stranger in a strange land"
    root = huffman.build_huffman_tree(huffman.freq_table(data))
    codes = huffman.generate_huffman_codes(root)
    assert huffman.decode_bits(huffman.encode_bits(data, codes), root) == data


def test_decode_bits_single_symbol():
    root = huffman.build_huffman_tree({ord('z'): 3})
    assert huffman.decode_bits("000", root) == b"zzz"
    with pytest.raises(ValueError):
        huffman.decode_bits("01", root)


def test_decode_bits_rejects_partial_code():
    root = huffman.build_huffman_tree(huffman.freq_table(b"aaabbc"))
    with pytest.raises(ValueError):
        huffman.decode_bits("0001", root)
