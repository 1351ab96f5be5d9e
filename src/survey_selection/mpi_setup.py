"""
MPI Setup Module

Optional mpi4py support for spreading a candidate batch over processes:
communicator setup with a single-process fallback, and the collective
steps a distributed selection needs (summing stage counts, collecting the
selected indices on the root rank).
"""

import numpy as np


def initialize_mpi():
    """
    Set up the communicator for a distributed selection.

    Returns
    -------
    tuple
        (comm, rank, size, MPI_AVAILABLE); without mpi4py the run is a
        single rank with ``comm`` set to None
    """
    try:
        from mpi4py import MPI
    except ImportError:
        print("mpi4py not available: selecting all candidates on one process")
        return None, 0, 1, False

    comm = MPI.COMM_WORLD
    rank, size = comm.Get_rank(), comm.Get_size()
    if rank == 0:
        print(f"Distributing candidate selection over {size} MPI processes")
    return comm, rank, size, True


def reduce_stage_counts(comm, size, counts):
    """
    Sum per-stage survivor counts over all ranks.

    Parameters
    ----------
    comm : MPI.Comm or None
        Communicator; None or a single rank returns ``counts`` unchanged
    size : int
        Number of MPI processes
    counts : dict
        Stage to local survivor count

    Returns
    -------
    dict
        Stage to global survivor count, identical on every rank
    """
    if comm is None or size <= 1:
        return dict(counts)
    # every rank iterates the same stages in the same order
    return {stage: comm.allreduce(count) for stage, count in counts.items()}


def gather_indices(comm, rank, size, indices, root=0):
    """
    Collect the selected candidate indices of all ranks on ``root``.

    Returns the sorted global indices on ``root`` and None elsewhere.
    """
    indices = np.asarray(indices)
    if comm is None or size <= 1:
        return np.sort(indices)

    shares = comm.gather(indices, root=root)
    if rank != root:
        return None
    return np.sort(np.concatenate(shares))


def finalize_mpi(comm, rank, size, MPI_AVAILABLE):
    """Wait for every rank to finish its share; no-op on a single process."""
    if MPI_AVAILABLE and comm is not None and size > 1:
        print(f"Rank {rank}: waiting for the other ranks to finish selection")
        comm.Barrier()
