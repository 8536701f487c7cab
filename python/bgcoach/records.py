"""
Position records for durable storage and their expansion into training inputs.

A :class:`PositionRecord` is the persisted form: a position ID and three
probabilities, the convention other backgammon programs exchange.  ``win``
includes the chance to win a gammon or backgammon; ``win_g`` and ``lose_g``
include backgammons.  The two single-game probabilities are not stored, they
follow from the other three because the distribution sums to one.

An :class:`InputsRecord` re-expands a position record into all four
probabilities plus the neural-net input vector for the position.

File formats::

    position_id,win,win_g,lose_g
    4HPwATDgc/ABMA,0.5,0.15,0.13

    win_normal;win_gammon;lose_normal;lose_gammon;i0;i1;...
"""

from __future__ import annotations

import csv
import logging
import os
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Protocol, Sequence

import numpy as np

from .position import GnubgPositionIds, PositionCodec
from .types import EPSILON, PROBABILITY_FIELDS, Probabilities

logger = logging.getLogger(__name__)

POSITION_FIELDS: tuple[str, ...] = ("position_id", "win", "win_g", "lose_g")


class InputsGenerator(Protocol):
    """Produces the flat numeric input vector of a position for one model."""

    def inputs_for(self, position: Any) -> Sequence[float]: ...


class RecordFormatError(ValueError):
    """A persisted record is malformed or violates the probability bounds."""

    def __init__(self, message: str, line: int | None = None):
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


@dataclass(frozen=True)
class PositionRecord:
    """Position ID and three probabilities, meant to be kept long term."""

    position_id: str
    win: float       # P(any win)
    win_g: float     # P(gammon or backgammon win)
    lose_g: float    # P(gammon or backgammon loss)

    def __post_init__(self):
        win, win_g, lose_g = self.win, self.win_g, self.lose_g
        if not (-EPSILON <= win_g <= win + EPSILON and win <= 1.0 + EPSILON):
            raise RecordFormatError(
                f"{self.position_id}: need 0 <= win_g <= win <= 1, got win={win}, win_g={win_g}"
            )
        if not (-EPSILON <= lose_g <= 1.0 + EPSILON):
            raise RecordFormatError(
                f"{self.position_id}: need 0 <= lose_g <= 1, got lose_g={lose_g}"
            )
        if win + lose_g > 1.0 + EPSILON:
            raise RecordFormatError(
                f"{self.position_id}: win + lose_g exceeds 1 ({win} + {lose_g})"
            )

    @classmethod
    def from_probabilities(
        cls,
        position: Any,
        probabilities: Probabilities,
        codec: PositionCodec | None = None,
    ) -> PositionRecord:
        codec = codec or GnubgPositionIds()
        return cls(
            position_id=codec.to_identifier(position),
            win=probabilities.win_normal + probabilities.win_gammon,
            win_g=probabilities.win_gammon,
            lose_g=probabilities.lose_gammon,
        )

    @staticmethod
    def csv_header() -> list[str]:
        return list(POSITION_FIELDS)

    def probabilities(self) -> Probabilities:
        """All four probabilities, single-game values reconstructed."""
        return Probabilities(
            win_normal=self.win - self.win_g,
            win_gammon=self.win_g,
            lose_normal=1.0 - self.win - self.lose_g,
            lose_gammon=self.lose_g,
        )

    def to_row(self) -> list[str]:
        return [self.position_id, repr(self.win), repr(self.win_g), repr(self.lose_g)]

    @classmethod
    def from_row(cls, row: Sequence[str], line: int | None = None) -> PositionRecord:
        if len(row) != len(POSITION_FIELDS):
            raise RecordFormatError(
                f"expected {len(POSITION_FIELDS)} fields, got {len(row)}", line
            )
        position_id = row[0]
        if not position_id:
            raise RecordFormatError("empty position_id", line)
        if position_id != position_id.strip():
            raise RecordFormatError(f"whitespace around position_id {position_id!r}", line)
        try:
            win, win_g, lose_g = (float(v) for v in row[1:])
        except ValueError:
            raise RecordFormatError(f"invalid probability in {list(row)!r}", line) from None
        try:
            return cls(position_id, win, win_g, lose_g)
        except RecordFormatError as e:
            raise RecordFormatError(str(e), line) from None


@dataclass(frozen=True)
class InputsRecord:
    """Four probabilities and the input vector of one position, for training."""

    win_normal: float
    win_gammon: float
    lose_normal: float
    lose_gammon: float
    inputs: tuple[float, ...]

    @classmethod
    def from_position_record(
        cls,
        record: PositionRecord,
        inputs_gen: InputsGenerator,
        codec: PositionCodec | None = None,
    ) -> InputsRecord:
        codec = codec or GnubgPositionIds()
        try:
            position = codec.from_identifier(record.position_id)
        except ValueError as e:
            raise RecordFormatError(f"undecodable position_id: {e}") from e
        probs = record.probabilities()
        return cls(
            win_normal=probs.win_normal,
            win_gammon=probs.win_gammon,
            lose_normal=probs.lose_normal,
            lose_gammon=probs.lose_gammon,
            inputs=tuple(float(x) for x in inputs_gen.inputs_for(position)),
        )

    def probabilities(self) -> Probabilities:
        return Probabilities(self.win_normal, self.win_gammon,
                             self.lose_normal, self.lose_gammon)

    @staticmethod
    def csv_header(n_inputs: int) -> list[str]:
        return list(PROBABILITY_FIELDS) + [f"i{k}" for k in range(n_inputs)]

    def to_row(self) -> list[str]:
        return [repr(v) for v in self.probabilities().to_list()] + [repr(x) for x in self.inputs]


# ---------------------------------------------------------------------------
# Position record files
# ---------------------------------------------------------------------------


def write_position_records(path: str, records: Iterable[PositionRecord]) -> int:
    """Write records to a new CSV file, header first.  Returns the row count."""
    with open(path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(PositionRecord.csv_header())
        n = 0
        for record in records:
            writer.writerow(record.to_row())
            n += 1
    logger.debug("Wrote %d position records to %s", n, path)
    return n


def append_position_records(path: str, records: Iterable[PositionRecord]) -> int:
    """Append records to a CSV file, writing the header only if it is new."""
    new_file = not os.path.exists(path) or os.path.getsize(path) == 0
    with open(path, "a", newline="") as f:
        writer = csv.writer(f)
        if new_file:
            writer.writerow(PositionRecord.csv_header())
        n = 0
        for record in records:
            writer.writerow(record.to_row())
            n += 1
    logger.debug("Appended %d position records to %s", n, path)
    return n


def read_position_records(path: str) -> Iterator[PositionRecord]:
    """Yield the records of a position CSV file.

    Raises RecordFormatError on a wrong header or the first malformed row.
    """
    for _, record in _read_numbered(path):
        yield record


def _read_numbered(path: str) -> Iterator[tuple[int, PositionRecord]]:
    """Yield ``(line, record)`` pairs of a position CSV file."""
    with open(path, "r", newline="") as f:
        reader = csv.reader(f)
        header = next(reader, None)
        if header is None:
            raise RecordFormatError(f"{path} is empty, expected a header", 1)
        if [h.strip() for h in header] != PositionRecord.csv_header():
            raise RecordFormatError(
                f"unexpected header {header!r}, expected {PositionRecord.csv_header()!r}", 1
            )
        n = 0
        for row in reader:
            if not row or all(not v.strip() for v in row):
                continue
            yield reader.line_num, PositionRecord.from_row(row, reader.line_num)
            n += 1
    logger.debug("Read %d position records from %s", n, path)


# ---------------------------------------------------------------------------
# Training inputs
# ---------------------------------------------------------------------------


def write_inputs_records(path: str, records: Iterable[InputsRecord]) -> int:
    """Write inputs records as ``;``-separated CSV.  Returns the row count.

    All records must have the same number of inputs; this is checked before
    the file is opened, so a mismatch leaves any existing file untouched.
    """
    records = list(records)
    n_inputs = len(records[0].inputs) if records else 0
    for k, record in enumerate(records):
        if len(record.inputs) != n_inputs:
            raise ValueError(
                f"Record {k} has {len(record.inputs)} inputs, expected {n_inputs}"
            )

    with open(path, "w", newline="") as f:
        writer = csv.writer(f, delimiter=";")
        writer.writerow(InputsRecord.csv_header(n_inputs))
        for record in records:
            writer.writerow(record.to_row())
    logger.debug("Wrote %d inputs records to %s", len(records), path)
    return len(records)


def training_arrays(records: Iterable[InputsRecord]) -> tuple[np.ndarray, np.ndarray]:
    """Stack records for a trainer.

    Returns:
        inputs: numpy array of float32, shape [N, n_inputs]
        targets: numpy array of float32, shape [N, 4]
            (win_normal, win_gammon, lose_normal, lose_gammon)
    """
    inputs = []
    targets = []
    for record in records:
        inputs.append(record.inputs)
        targets.append(record.probabilities().to_list())

    if not inputs:
        return np.zeros((0, 0), dtype=np.float32), np.zeros((0, 4), dtype=np.float32)

    lengths = {len(x) for x in inputs}
    if len(lengths) != 1:
        raise ValueError(f"Inputs records have differing lengths: {sorted(lengths)}")

    return np.array(inputs, dtype=np.float32), np.array(targets, dtype=np.float32)


def load_training_arrays(
    path: str,
    inputs_gen: InputsGenerator,
    codec: PositionCodec | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Read a position CSV file and expand it into training arrays."""
    return training_arrays(expand_position_records(path, inputs_gen, codec))


def expand_position_records(
    path: str,
    inputs_gen: InputsGenerator,
    codec: PositionCodec | None = None,
) -> list[InputsRecord]:
    """Read a position CSV file and expand every record into an InputsRecord.

    A position ID the codec cannot decode raises RecordFormatError naming
    its line.
    """
    codec = codec or GnubgPositionIds()
    expanded = []
    for line, record in _read_numbered(path):
        try:
            expanded.append(InputsRecord.from_position_record(record, inputs_gen, codec))
        except RecordFormatError as e:
            raise RecordFormatError(str(e), line) from e
    return expanded
