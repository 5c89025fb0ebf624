"""
Running independent training jobs concurrently.

Trainers keep all mutable state local to ``train`` and datasets and models
are immutable, so separate jobs can run on separate threads without locks.
"""

import os
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

from .data import Dataset
from .model import Trainer, TrainingResult


def _resolve_workers(n_jobs: int, max_workers: Optional[int]) -> int:
    cpu = os.cpu_count() or 1
    if max_workers is None:
        return max(1, min(cpu, n_jobs))
    return max(1, min(max_workers, n_jobs))


def train_parallel(
    jobs: Sequence[Tuple[Trainer, Dataset]],
    max_workers: Optional[int] = None,
) -> List[TrainingResult]:
    """
    Train several models at once.

    Parameters
    ----------
    jobs : Sequence[Tuple[Trainer, Dataset]]
        ``(trainer, dataset)`` pairs. Each trainer must not be shared with
        another job.
    max_workers : int, optional
        Thread count. Defaults to ``min(os.cpu_count(), len(jobs))``.

    Returns
    -------
    results : List[TrainingResult]
        One result per job, in the order of ``jobs``.

    Raises
    ------
    Exception
        The first exception raised by any job (e.g. EmptyDataset).
    """
    jobs = list(jobs)
    if not jobs:
        return []

    workers = _resolve_workers(len(jobs), max_workers)
    if workers == 1:
        return [trainer.train(dataset) for trainer, dataset in jobs]

    with ThreadPoolExecutor(max_workers=workers) as pool:
        futures = [pool.submit(trainer.train, dataset) for trainer, dataset in jobs]
        return [future.result() for future in futures]
