#!/usr/bin/env python3
"""
Run Survey Selection

Applies a survey selection to a light-cone candidate file with MPI
parallelization.

The input is a NumPy ``.npz`` archive with one array per column: ``dc``,
``ra``, ``dec``, the model mass columns of the survey, and the precomputed
observables ``mag`` and ``zobs``.

Usage:
    python run_selection.py config/examples/gama_run.yaml candidates.npz selected.npz
"""

import sys
import argparse
import os

import numpy as np

# Add src to path for module imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from survey_selection import (
    ConfigurationError, ModelRecord, ObservedProperties, Position, SelectionRun,
)
from survey_selection.mpi_setup import initialize_mpi, finalize_mpi, gather_indices

OBSERVABLE_COLUMNS = ("mag", "zobs")
POSITION_COLUMNS = ("dc", "ra", "dec")


def load_candidates(input_path):
    """Load candidate columns and split them into positions, model and observables."""
    with np.load(input_path) as data:
        columns = {name: data[name] for name in data.files}

    missing = [name for name in POSITION_COLUMNS + OBSERVABLE_COLUMNS if name not in columns]
    if missing:
        raise KeyError(f"Candidate file {input_path} is missing columns: {', '.join(missing)}")

    positions = Position(*(columns.pop(name) for name in POSITION_COLUMNS))
    observables = {name: columns.pop(name) for name in OBSERVABLE_COLUMNS}
    # row numbers travel with the model record so observables can be looked up
    columns["row"] = np.arange(len(positions))
    return positions, ModelRecord(columns), observables


def run_selection(config_path, input_path, output_path):
    """Select candidates on all ranks and write the kept indices from rank 0."""
    comm, rank, size, MPI_AVAILABLE = initialize_mpi()

    try:
        # Fails before any candidate work if the survey is not known
        run = SelectionRun.from_config(config_path, rank=rank)
        if rank == 0:
            print(run.summary())

        positions, model, observables = load_candidates(input_path)

        def observe(subset_positions, subset_model):
            rows = subset_model["row"]
            return ObservedProperties(mag=observables["mag"][rows], zobs=observables["zobs"][rows])

        local_indices, result = run.select_distributed(positions, model, observe, size=size, comm=comm)
        kept = gather_indices(comm, rank, size, local_indices[result.selected])

        if rank == 0:
            for stage, count in result.stage_counts.items():
                print(f"  after {stage.label}: {count}")
            np.savez(output_path, selected=kept)
            print(f"Selected {kept.size} of {len(positions)} candidates, saved to: {output_path}")
    finally:
        finalize_mpi(comm, rank, size, MPI_AVAILABLE)


def main():
    parser = argparse.ArgumentParser(description="Apply a survey selection to light-cone candidates")
    parser.add_argument("config", help="Run configuration file")
    parser.add_argument("input", help="Candidate .npz file")
    parser.add_argument("output", help="Output .npz file for the selected indices")
    args = parser.parse_args()

    try:
        run_selection(args.config, args.input, args.output)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
