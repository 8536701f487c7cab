"""Data file configuration for rollout records and training inputs.

Scripts locate the position records and the generated inputs through
:class:`DataConfig`.  The default data directory is ``data/`` at the
repository root; set ``BGCOACH_DATA_DIR`` to use another one.
"""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass

from .types import EPSILON

DATA_DIR_ENV = "BGCOACH_DATA_DIR"

DEFAULT_POSITIONS_FILE = "rollouts.csv"
DEFAULT_INPUTS_FILE = "training-inputs.csv"


def _default_data_dir() -> str:
    """Return the data directory: $BGCOACH_DATA_DIR, else <repo>/data."""
    env_dir = os.getenv(DATA_DIR_ENV, "")
    if env_dir:
        return os.path.abspath(env_dir)
    return os.path.normpath(
        os.path.join(os.path.dirname(__file__), os.pardir, os.pardir, "data")
    )


@dataclass
class DataConfig:
    """Where position records and training inputs live."""

    data_dir: str
    positions_file: str = DEFAULT_POSITIONS_FILE
    inputs_file: str = DEFAULT_INPUTS_FILE
    tolerance: float = EPSILON

    @property
    def positions_path(self) -> str:
        return os.path.join(self.data_dir, self.positions_file)

    @property
    def inputs_path(self) -> str:
        return os.path.join(self.data_dir, self.inputs_file)

    # ------------------------------------------------------------------
    # Factory methods
    # ------------------------------------------------------------------

    @classmethod
    def default(cls) -> DataConfig:
        return cls(data_dir=_default_data_dir())

    # ------------------------------------------------------------------
    # argparse helpers for scripts
    # ------------------------------------------------------------------

    @staticmethod
    def add_data_args(parser: argparse.ArgumentParser) -> None:
        """Add ``--data-dir``, ``--positions`` and ``--inputs-file`` arguments."""
        parser.add_argument(
            "--data-dir",
            type=str,
            default="",
            help=f"Data directory (default: ${DATA_DIR_ENV} or <repo>/data)",
        )
        parser.add_argument(
            "--positions",
            type=str,
            default=DEFAULT_POSITIONS_FILE,
            help=f"Position records CSV inside the data directory (default: {DEFAULT_POSITIONS_FILE})",
        )
        parser.add_argument(
            "--inputs-file",
            type=str,
            default=DEFAULT_INPUTS_FILE,
            help=f"Training inputs output file (default: {DEFAULT_INPUTS_FILE})",
        )

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> DataConfig:
        """Build a DataConfig from args parsed with :meth:`add_data_args`."""
        return cls(
            data_dir=os.path.abspath(args.data_dir) if args.data_dir else _default_data_dir(),
            positions_file=args.positions,
            inputs_file=args.inputs_file,
        )

    def ensure_dir(self) -> None:
        os.makedirs(self.data_dir, exist_ok=True)

