"""
Unit tests for BLTM generation and GF(2) arithmetic
"""

import numpy as np
import pytest

from hidelab.services.steganography.core.matrix import (
    DEFAULT_SEED,
    generate,
    is_valid_bltm,
    seed_bits,
    solve_flips,
    syndrome,
)

# Matrix of the worked example: columns (1,1,1), (0,1,1), (0,0,1)
REFERENCE = np.array([[1, 0, 0], [1, 1, 0], [1, 1, 1]], dtype=np.uint8)


class TestGenerate:

    def test_default_shape_and_structure(self):
        matrix = generate()
        assert matrix.shape == (3, 3)
        assert matrix.dtype == np.uint8
        assert is_valid_bltm(matrix)

    @pytest.mark.parametrize("k", [1, 2, 5, 16, 64])
    def test_structure_for_any_order(self, k):
        matrix = generate(1234, k)
        assert matrix.shape == (k, k)
        assert (np.diag(matrix) == 1).all()
        assert not np.triu(matrix, 1).any()

    def test_deterministic(self):
        assert np.array_equal(generate(99, 16), generate(99, 16))
        assert np.array_equal(generate(None), generate(DEFAULT_SEED))

    def test_default_matrix_is_pinned(self):
        assert generate().tolist() == [[1, 0, 0], [0, 1, 0], [1, 0, 1]]

    def test_seeded_matrices_are_pinned(self):
        assert generate(42).tolist() == [[1, 0, 0], [0, 1, 0], [1, 1, 1]]
        assert generate(7, 5).tolist() == [
            [1, 0, 0, 0, 0],
            [1, 1, 0, 0, 0],
            [1, 1, 1, 0, 0],
            [1, 0, 0, 1, 0],
            [0, 0, 1, 1, 1],
        ]

    def test_bit_stream_spans_several_digests(self):
        bits = seed_bits(3, 600)
        assert bits.shape == (600,)
        assert set(np.unique(bits)) <= {0, 1}
        assert np.array_equal(bits, seed_bits(3, 600))

    def test_large_seeds_accepted(self):
        assert is_valid_bltm(generate(2**80, 4))

    def test_seed_changes_lower_triangle(self):
        assert not np.array_equal(generate(1, 32), generate(2, 32))

    @pytest.mark.parametrize("seed", [-1, 1.5, "7", True])
    def test_invalid_seed(self, seed):
        with pytest.raises(ValueError):
            generate(seed)

    def test_invalid_order(self):
        with pytest.raises(ValueError):
            generate(1, 0)


class TestValidation:

    def test_rejects_upper_entries(self):
        bad = REFERENCE.copy()
        bad[0, 2] = 1
        assert not is_valid_bltm(bad)

    def test_rejects_zero_diagonal(self):
        bad = REFERENCE.copy()
        bad[1, 1] = 0
        assert not is_valid_bltm(bad)

    def test_rejects_non_binary(self):
        bad = REFERENCE.copy()
        bad[2, 0] = 2
        assert not is_valid_bltm(bad)

    def test_rejects_non_square(self):
        assert not is_valid_bltm(np.ones((2, 3), dtype=np.uint8))


class TestArithmetic:

    def test_reference_syndromes(self):
        groups = np.array([[1, 1, 1], [0, 1, 0]], dtype=np.uint8)
        assert syndrome(REFERENCE, groups).tolist() == [[1, 0, 1], [0, 1, 1]]

    def test_reference_flip(self):
        # carrier 111 has syndrome 101; to carry 110 only the middle bit flips
        delta = np.array([[0, 1, 1]], dtype=np.uint8)
        assert solve_flips(REFERENCE, delta).tolist() == [[0, 1, 0]]

    def test_reference_lookup_table(self):
        deltas = np.array([[(v >> 2) & 1, (v >> 1) & 1, v & 1] for v in range(8)], dtype=np.uint8)
        flips = solve_flips(REFERENCE, deltas)
        expected = [
            [0, 0, 0], [0, 0, 1], [0, 1, 1], [0, 1, 0],
            [1, 1, 0], [1, 1, 1], [1, 0, 1], [1, 0, 0],
        ]
        assert flips.tolist() == expected

    @pytest.mark.parametrize("k", [3, 8, 24])
    def test_solution_reproduces_delta(self, k):
        rng = np.random.default_rng(k)
        matrix = generate(k, k)
        delta = rng.integers(0, 2, size=(200, k), dtype=np.uint8)
        flips = solve_flips(matrix, delta)
        assert np.array_equal(syndrome(matrix, flips), delta)

    def test_zero_delta_needs_no_flips(self):
        matrix = generate(5, 8)
        assert not solve_flips(matrix, np.zeros((10, 8), dtype=np.uint8)).any()
