"""bgcoach: rollout statistics and training data for backgammon networks.

Turns rollout results into cubeless probabilities and equity, stores them
as compact position records, and expands the records into training inputs.

Quick start::

    from bgcoach import GameResult, Probabilities, PositionRecord, ResultCounter
    from bgcoach import STARTING_BOARD

    counter = ResultCounter()
    for code in game_over_codes:          # from the rollout engine
        counter.record(GameResult.from_game_over(code))
    probs = Probabilities.from_counter(counter)
    print(f"{probs.equity():+.3f}  {probs.win():.1%}")
    record = PositionRecord.from_probabilities(STARTING_BOARD, probs)
"""

from .config import DataConfig
from .position import (
    STARTING_BOARD,
    GnubgPositionIds,
    PositionCodec,
    board_from_position_id,
    board_to_position_id,
    flip_board,
)
from .records import (
    InputsGenerator,
    InputsRecord,
    PositionRecord,
    RecordFormatError,
    append_position_records,
    expand_position_records,
    load_training_arrays,
    read_position_records,
    training_arrays,
    write_inputs_records,
    write_position_records,
)
from .results import GameResult, ResultCounter, merge_all
from .types import EPSILON, Probabilities

__all__ = [
    "GameResult",
    "ResultCounter",
    "merge_all",
    "Probabilities",
    "EPSILON",
    "PositionRecord",
    "InputsRecord",
    "InputsGenerator",
    "RecordFormatError",
    "read_position_records",
    "write_position_records",
    "append_position_records",
    "write_inputs_records",
    "training_arrays",
    "expand_position_records",
    "load_training_arrays",
    "PositionCodec",
    "GnubgPositionIds",
    "STARTING_BOARD",
    "board_to_position_id",
    "board_from_position_id",
    "flip_board",
    "DataConfig",
]
