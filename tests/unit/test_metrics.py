"""
Unit tests for classification and regression scores.
"""

import numpy as np
import pytest

from learnkit.exceptions import DimensionMismatch
from learnkit.metrics import accuracy, f1, neg_mean_squared_error, precision, recall, row_accuracy


class TestAccuracy:
    """Tests for accuracy scores."""

    def test_accuracy(self):
        assert accuracy([1, 2, 3, 4, 5, 6], [1, 2, 3, 3, 5, 1]) == pytest.approx(2.0 / 3.0)
        assert accuracy([1, 1, 1, 0, 0, 0], [1, 1, 1, 0, 0, 1]) == pytest.approx(5.0 / 6.0)

    def test_row_accuracy(self):
        outputs = [[1.0, 0.0], [0.0, 1.0], [1.0, 1.0]]
        targets = [[1.0, 0.0], [0.0, 0.0], [1.0, 1.0]]
        assert row_accuracy(outputs, targets) == pytest.approx(2.0 / 3.0)

    def test_accuracy_on_rows_delegates(self):
        outputs = np.array([[1.0], [0.0]])
        targets = np.array([[1.0], [1.0]])
        assert accuracy(outputs, targets) == 0.5

    def test_length_mismatch(self):
        with pytest.raises(DimensionMismatch):
            accuracy([1, 0], [1, 0, 1])

    def test_empty_input(self):
        with pytest.raises(ValueError):
            accuracy([], [])


class TestBinaryScores:
    """Precision, recall and F1 on 0/1 labels."""

    CASES = [
        # outputs, targets, precision, recall, f1
        ([1, 1, 1, 0, 0, 0], [1, 1, 0, 0, 1, 1], 2.0 / 3.0, 0.5, 0.5714285714285715),
        ([1, 1, 1, 0, 1, 1], [1, 1, 0, 0, 1, 1], 0.8, 1.0, 0.888888888888889),
        ([0, 0, 0, 1, 1, 1], [1, 1, 1, 1, 1, 0], 2.0 / 3.0, 0.4, 0.5),
        ([1, 1, 1, 1, 1, 0], [0, 0, 0, 1, 1, 1], 0.4, 2.0 / 3.0, 0.5),
    ]

    @pytest.mark.parametrize("outputs,targets,expected,_r,_f", CASES)
    def test_precision(self, outputs, targets, expected, _r, _f):
        assert precision(outputs, targets) == pytest.approx(expected)

    @pytest.mark.parametrize("outputs,targets,_p,expected,_f", CASES)
    def test_recall(self, outputs, targets, _p, expected, _f):
        assert recall(outputs, targets) == pytest.approx(expected)

    @pytest.mark.parametrize("outputs,targets,_p,_r,expected", CASES)
    def test_f1(self, outputs, targets, _p, _r, expected):
        assert f1(outputs, targets) == pytest.approx(expected)

    @pytest.mark.parametrize("score", [precision, recall, f1])
    def test_outputs_not_two_class(self, score):
        with pytest.raises(ValueError, match="2 class"):
            score([1, 2, 1, 0, 0, 0], [1, 1, 0, 0, 1, 1])

    @pytest.mark.parametrize("score", [precision, recall, f1])
    def test_targets_not_two_class(self, score):
        with pytest.raises(ValueError, match="2 class"):
            score([1, 0, 1, 0, 0, 0], [1, 2, 0, 0, 1, 1])

    def test_zero_denominators(self):
        """No positive predictions or targets score 0 instead of dividing by zero."""
        assert precision([0, 0, 0], [1, 0, 1]) == 0.0
        assert recall([1, 0, 1], [0, 0, 0]) == 0.0
        assert f1([0, 0], [0, 0]) == 0.0


class TestNegMeanSquaredError:
    """Tests for neg_mean_squared_error."""

    def test_single_output(self):
        outputs = [[1.0], [2.0], [3.0]]
        targets = [[2.0], [4.0], [3.0]]
        assert neg_mean_squared_error(outputs, targets) == pytest.approx(-5.0 / 3.0)

    def test_multiple_outputs_sum_per_row(self):
        outputs = [[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]]
        targets = [[1.5, 2.5], [5.0, 6.0], [5.5, 6.5]]
        assert neg_mean_squared_error(outputs, targets) == pytest.approx(-3.0)

    def test_perfect_prediction(self):
        assert neg_mean_squared_error([1.0, 2.0], [1.0, 2.0]) == 0.0

    def test_shape_mismatch(self):
        with pytest.raises(DimensionMismatch):
            neg_mean_squared_error([[1.0, 2.0]], [[1.0]])
