"""Tests for synthetic data generation."""
import numpy as np
import pytest

from madgate.simulate import simulate_multimodal


class TestSimulateMultimodal:

    def test_shape_and_names(self):
        adata = simulate_multimodal(n_cells=300, n_channels=3, random_seed=0, verbose=False)
        assert adata.shape == (300, 3)
        assert list(adata.var_names) == ['ch_1', 'ch_2', 'ch_3']
        assert 'ch_2_ground_truth_peak' in adata.obs

    def test_ground_truth_matches_components(self):
        adata = simulate_multimodal(n_cells=4000, peaks=[(0.0, 0.5), (10.0, 0.5)],
                                    random_seed=1, verbose=False)
        truth = adata.obs['ch_1_ground_truth_peak'].to_numpy()
        x = adata.X[:, 0]
        assert set(np.unique(truth)) == {1, 2}
        assert x[truth == 1].mean() == pytest.approx(0.0, abs=0.1)
        assert x[truth == 2].mean() == pytest.approx(10.0, abs=0.1)

    def test_weights(self):
        adata = simulate_multimodal(n_cells=5000, weights=[3, 1], random_seed=2, verbose=False)
        truth = adata.obs['ch_1_ground_truth_peak'].to_numpy()
        assert (truth == 1).mean() == pytest.approx(0.75, abs=0.03)
        assert adata.uns['simulation']['weights'] == pytest.approx([0.75, 0.25])

    def test_reproducible(self):
        a = simulate_multimodal(n_cells=100, random_seed=7, verbose=False)
        b = simulate_multimodal(n_cells=100, random_seed=7, verbose=False)
        np.testing.assert_array_equal(a.X, b.X)

    @pytest.mark.parametrize("kwargs", [
        {'n_cells': 0},
        {'n_channels': 0},
        {'peaks': []},
        {'peaks': [(1.0, 0.0)]},
        {'weights': [1.0]},
        {'weights': [0.0, 0.0]},
    ])
    def test_invalid_parameters(self, kwargs):
        with pytest.raises(ValueError):
            simulate_multimodal(verbose=False, **kwargs)

    def test_verbose_output(self, capsys):
        simulate_multimodal(n_cells=10, random_seed=0)
        assert "Simulating 10 events" in capsys.readouterr().out
