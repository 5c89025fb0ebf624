"""
Tests for the shared Model/Trainer contract and model evaluation.
"""

import numpy as np
import pytest

from learnkit import (
    Dataset,
    DidNotConverge,
    Model,
    NetworkConfig,
    NetworkTrainer,
    NonFiniteGradient,
    SVMConfig,
    SVMTrainer,
    Trainer,
    TrainingResult,
    evaluate_model,
)


@pytest.fixture
def signs():
    x = np.arange(-5.0, 6.0)
    return Dataset(x, np.where(x > 0, 1.0, -1.0))


@pytest.fixture
def and_gate():
    return Dataset([[0, 0], [0, 1], [1, 0], [1, 1]], [0, 0, 0, 1])


class TestCapabilities:
    """Both model families satisfy the same protocols."""

    def test_trainers_are_trainers(self):
        assert isinstance(SVMTrainer(), Trainer)
        assert isinstance(NetworkTrainer([2, 1]), Trainer)

    def test_models_are_models(self, signs, and_gate):
        svm = SVMTrainer(SVMConfig(random_state=0)).train(signs).model
        net = NetworkTrainer([2, 1], NetworkConfig(epochs=1)).train(and_gate).model

        assert isinstance(svm, Model)
        assert isinstance(net, Model)
        assert svm.n_features == 1
        assert net.n_features == 2

    def test_trainers_are_interchangeable(self, signs):
        """Test that callers can train through the protocol alone."""
        trainers = [
            SVMTrainer(SVMConfig(penalty=10.0, random_state=0)),
            NetworkTrainer([1, 1], NetworkConfig(activation="tanh", epochs=200, random_state=0)),
        ]
        for trainer in trainers:
            result = trainer.train(signs)
            assert isinstance(result, TrainingResult)
            assert result.model.n_features == signs.n_features


class TestTrainingResult:
    """Tests for TrainingResult status helpers."""

    def test_clean_result(self):
        result = TrainingResult(model=object())
        assert result.converged
        assert result.ok
        assert result.unwrap() is result.model

    def test_non_fatal_error(self):
        result = TrainingResult(model="m", error=DidNotConverge("cap reached", n_iterations=3))
        assert not result.converged
        assert result.ok
        assert result.unwrap() == "m"

    def test_fatal_error(self):
        result = TrainingResult(model="m", error=NonFiniteGradient("nan", epoch=2))
        assert not result.ok
        with pytest.raises(NonFiniteGradient):
            result.unwrap()

    def test_error_hierarchy(self):
        assert issubclass(DidNotConverge, RuntimeWarning)
        assert issubclass(NonFiniteGradient, FloatingPointError)
        assert issubclass(NonFiniteGradient, RuntimeWarning)


class TestEvaluateModel:
    """Tests for evaluate_model."""

    def test_svm_scores(self, signs):
        model = SVMTrainer(SVMConfig(penalty=10.0, random_state=0)).train(signs).model
        scores = evaluate_model(model, signs)

        assert scores["accuracy"] == 1.0
        assert scores["n_errors"] == 0
        assert scores["neg_mean_squared_error"] == 0.0

    def test_network_scores_with_threshold(self, and_gate):
        model = NetworkTrainer(
            [2, 1],
            NetworkConfig(epochs=2000, learning_rate=1.0, cost="cross_entropy", random_state=0),
        ).train(and_gate).model
        scores = evaluate_model(model, and_gate, threshold=0.5)

        assert scores["accuracy"] == 1.0
        assert scores["n_errors"] == 0
        assert -0.05 < scores["neg_mean_squared_error"] <= 0.0

    def test_counts_errors(self, signs):
        model = SVMTrainer().train(Dataset([[0.0]], [1.0])).model
        scores = evaluate_model(model, signs)

        # Constant +1 predictor is wrong on the six non-positive samples
        assert scores["n_errors"] == 6
        assert scores["accuracy"] == pytest.approx(5 / 11)

    def test_empty_dataset(self, signs):
        model = SVMTrainer().train(signs).model
        with pytest.raises(ValueError):
            evaluate_model(model, Dataset.from_pairs([]))
