"""
Tests for the feed-forward creature brain.

Verifies:
- Output shape and (-1, 1) bounds
- Hand-computed forward pass with the bias unit
- Input length mismatch -> zeros + error signal, no exception
- Genome export and reuse never share weight matrices
"""

import numpy as np
import pytest

from algogen.neural_network import NeuralNetwork
from algogen.data_types import BrainGenome
from algogen.rng import make_rng


def zero_genome(n_inputs=5, n_hidden=4, n_outputs=2) -> BrainGenome:
    return BrainGenome(w1=np.zeros((n_inputs + 1, n_hidden)), w2=np.zeros((n_hidden, n_outputs)))


class TestTopology:
    """Shapes and initialization"""

    def test_weight_shapes_include_bias_row(self):
        net = NeuralNetwork(5, 4, 2, rng=make_rng(1, "brain"))
        assert net.w1.shape == (6, 4), f"Expected w1 (6, 4), got {net.w1.shape}"
        assert net.w2.shape == (4, 2), f"Expected w2 (4, 2), got {net.w2.shape}"

    def test_random_weights_within_range(self):
        net = NeuralNetwork(5, 4, 2, rng=make_rng(2, "brain"))
        assert np.all(net.w1 >= -2.0) and np.all(net.w1 <= 2.0)
        assert np.all(net.w2 >= -2.0) and np.all(net.w2 <= 2.0)

    def test_same_seed_same_weights(self):
        a = NeuralNetwork(5, 4, 2, rng=make_rng(3, "brain"))
        b = NeuralNetwork(5, 4, 2, rng=make_rng(3, "brain"))
        assert np.array_equal(a.w1, b.w1)
        assert np.array_equal(a.w2, b.w2)

    def test_wrong_genome_shape_rejected(self):
        bad = BrainGenome(w1=np.zeros((5, 4)), w2=np.zeros((4, 2)))  # missing bias row
        with pytest.raises(ValueError):
            NeuralNetwork(5, 4, 2, genome=bad)


class TestCompute:
    """Forward pass"""

    def test_outputs_bounded(self):
        net = NeuralNetwork(5, 4, 2, rng=make_rng(4, "brain"))
        rng = np.random.default_rng(0)
        for _ in range(100):
            out = net.compute(rng.uniform(-1000.0, 1000.0, size=5).tolist())
            assert out.shape == (2,)
            assert np.all(np.abs(out) <= 1.0), f"Output {out} escaped tanh bounds"

    def test_zero_weights_give_zero_outputs(self):
        net = NeuralNetwork(5, 4, 2, genome=zero_genome())
        out = net.compute([3.0, 1.0, -2.0, 0.5, 100.0])
        assert np.array_equal(out, np.zeros(2))

    def test_matches_manual_forward_pass(self):
        net = NeuralNetwork(5, 4, 2, rng=make_rng(5, "brain"))
        inputs = [0.5, -1.0, 0.25, 0.0, 2.0]

        layer = np.array(inputs + [1.0])
        hidden = np.tanh(layer @ net.w1)
        expected = np.tanh(hidden @ net.w2)

        assert np.allclose(net.compute(inputs), expected)

    def test_bias_unit_drives_output_with_zero_inputs(self):
        genome = zero_genome()
        genome.w1[5, 0] = 10.0   # bias -> hidden 0
        genome.w2[0, 1] = 10.0   # hidden 0 -> output 1
        net = NeuralNetwork(5, 4, 2, genome=genome)

        out = net.compute([0.0] * 5)
        assert out[0] == 0.0
        assert out[1] == pytest.approx(np.tanh(10.0 * np.tanh(10.0)))

    def test_compute_is_stateless(self):
        net = NeuralNetwork(5, 4, 2, rng=make_rng(6, "brain"))
        inputs = [1.0, 2.0, 3.0, 4.0, 5.0]
        first = net.compute(inputs)
        net.compute([9.0, 9.0, 9.0, 9.0, 9.0])
        assert np.array_equal(net.compute(inputs), first)


class TestInputMismatch:
    """Wrong input length is reported, not raised"""

    @pytest.mark.parametrize("inputs", [[], [1.0, 2.0], [0.0] * 6])
    def test_mismatch_returns_zero_vector(self, inputs, capsys):
        net = NeuralNetwork(5, 4, 2, rng=make_rng(7, "brain"))

        out = net.compute(inputs)

        assert out.shape == (2,)
        assert np.array_equal(out, np.zeros(2))
        assert net.error_count == 1
        assert "[ERROR]" in capsys.readouterr().out

    def test_error_count_accumulates(self):
        net = NeuralNetwork(5, 4, 2, rng=make_rng(8, "brain"))
        net.compute([1.0])
        net.compute([1.0, 2.0])
        net.compute([0.0] * 5)
        assert net.error_count == 2


class TestGenomeExport:
    """export_genome() and genome reuse are deep copies"""

    def test_export_is_independent_copy(self):
        net = NeuralNetwork(5, 4, 2, rng=make_rng(9, "brain"))
        genome = net.export_genome()

        assert not np.shares_memory(genome.w1, net.w1)
        assert not np.shares_memory(genome.w2, net.w2)

        before = net.w1.copy()
        genome.w1[:] = 0.0
        assert np.array_equal(net.w1, before), "Editing an exported genome changed the brain"

    def test_reconstructed_brain_matches_original(self):
        original = NeuralNetwork(5, 4, 2, rng=make_rng(10, "brain"))
        clone = NeuralNetwork(5, 4, 2, genome=original.export_genome())

        inputs = [0.1, 0.2, 0.3, 0.4, 0.5]
        assert np.array_equal(clone.compute(inputs), original.compute(inputs))

    def test_two_brains_from_one_genome_share_nothing(self):
        genome = NeuralNetwork(5, 4, 2, rng=make_rng(11, "brain")).export_genome()
        a = NeuralNetwork(5, 4, 2, genome=genome)
        b = NeuralNetwork(5, 4, 2, genome=genome)

        assert not np.shares_memory(a.w1, b.w1)
        assert not np.shares_memory(a.w1, genome.w1)
        a.w2[0, 0] += 1.0
        assert a.w2[0, 0] != b.w2[0, 0]
