#!/usr/bin/env python3
"""
learnkit Quick Example Script

Trains one model of each family on the two reference problems and prints
what they predict.

Usage:
    python scripts/run_examples.py
"""

import numpy as np

from learnkit import (
    Dataset,
    Kernel,
    NetworkConfig,
    NetworkTrainer,
    SVMConfig,
    SVMTrainer,
    evaluate_model,
    list_kernels,
    train_network,
    train_parallel,
    train_svm,
)

print("=" * 60)
print("learnkit Quick Example")
print("=" * 60)

# Sign classifier
print("\n1. Kernel SVM on signed integers...")
inputs = list(range(-1000, 1000, 100))
data = Dataset.from_pairs([(x, 1 if x > 0 else -1) for x in inputs])
result = train_svm(data, Kernel.hyper_tan(), penalty=10.0, random_state=0)

misses = sum(result.model.predict([float(x)]) != (1.0 if x > 0 else -1.0) for x in inputs)
print(f"   {data.n_samples} samples, {result.model.n_support} support vectors")
print(f"   {result.n_iterations} SMO sweeps in {result.elapsed_time:.4f}s")
print(f"   Misses: {misses}")

# AND gate
print("\n2. Perceptron learning an AND gate...")
rng = np.random.default_rng(0)
corners = np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]])
X = corners[rng.integers(0, 4, size=100)] + rng.uniform(-0.1, 0.1, size=(100, 2))
y = ((X[:, 0] > 0.7) & (X[:, 1] > 0.7)).astype(float)
result = train_network(
    Dataset(X, y), [2, 1], cost="cross_entropy", learning_rate=1.0, epochs=300, random_state=0
)

print(f"   Final train loss: {result.history['train_loss'][-1]:.6f}")
for corner in corners:
    out = result.model.predict(corner)[0]
    print(f"     {corner.tolist()} -> {out:.4f}")

# Kernel comparison
print("\n3. Comparing kernels on a noisy disc...")
angles = rng.uniform(0, 2 * np.pi, size=200)
radii = np.concatenate([rng.uniform(0.0, 1.2, 100), rng.uniform(1.8, 3.0, 100)])
X = np.column_stack([radii * np.cos(angles), radii * np.sin(angles)])
labels = np.concatenate([np.ones(100), -np.ones(100)])
disc = Dataset(X, labels)
disc01 = Dataset(X, (labels + 1) / 2)

jobs = [
    (SVMTrainer(SVMConfig(kernel=Kernel(name), penalty=1.0, random_state=0)), disc)
    for name in list_kernels()
]
jobs.append(
    (
        NetworkTrainer([2, 8, 1], NetworkConfig(activation="tanh", output_activation="sigmoid",
                                                cost="cross_entropy", epochs=200, random_state=0)),
        disc01,
    )
)

for (trainer, dataset), res in zip(jobs, train_parallel(jobs)):
    if isinstance(trainer, SVMTrainer):
        name = trainer.config.kernel.kernel_type.value
        scores = evaluate_model(res.model, dataset)
    else:
        name = "network " + "-".join(str(n) for n in trainer.topology)
        scores = evaluate_model(res.model, dataset, threshold=0.5)
    status = "ok" if res.converged else type(res.error).__name__
    print(f"   {name:20s} accuracy = {scores['accuracy']:.3f} ({status})")

print("\n" + "=" * 60)
print("Done!")
print("=" * 60)
