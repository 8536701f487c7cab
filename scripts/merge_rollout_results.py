"""
Merge rollout worker results into the position records file.

Each worker writes one JSON file with the raw result counts of the positions
it rolled out:

    {"results": [{"board": [26 ints], "counts": [wn, wg, ln, lg]}, ...]}

A result may give "position_id" instead of "board".  Counts for the same
position from different workers are merged before the probabilities are
derived, then one record per position is appended to the positions CSV.

Usage:
    python merge_rollout_results.py results/worker_*.json
    python merge_rollout_results.py --data-dir /mnt/data --positions contact.csv results/*.json
"""

import os
import sys
import json
import time
import logging
import argparse

script_dir = os.path.dirname(os.path.abspath(__file__))
project_dir = os.path.dirname(script_dir)
sys.path.insert(0, os.path.join(project_dir, 'python'))

from bgcoach import (
    DataConfig,
    GnubgPositionIds,
    PositionRecord,
    Probabilities,
    ResultCounter,
    append_position_records,
)

log = logging.getLogger('merge_rollout_results')


def load_worker_counts(paths, codec):
    """Read worker JSON files and merge the counters per position ID."""
    counters = {}
    for path in paths:
        with open(path, 'r') as f:
            data = json.load(f)
        results = data['results']
        for r in results:
            if 'position_id' in r:
                position_id = r['position_id']
            else:
                position_id = codec.to_identifier(r['board'])
            counter = ResultCounter.from_list(r['counts'])
            if position_id in counters:
                counters[position_id] = counters[position_id].merge(counter)
            else:
                counters[position_id] = counter
        log.info(f'  {path}: {len(results)} results')
    return counters


def main():
    parser = argparse.ArgumentParser(description=__doc__.split('\n\n')[0].strip())
    parser.add_argument('results', nargs='+', help='Worker result JSON files')
    DataConfig.add_data_args(parser)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format='[%(asctime)s] %(message)s',
                        datefmt='%Y-%m-%d %H:%M:%S')

    config = DataConfig.from_args(args)
    config.ensure_dir()
    codec = GnubgPositionIds()

    t0 = time.time()
    log.info(f'Loading {len(args.results)} worker result files...')
    counters = load_worker_counts(args.results, codec)
    log.info(f'  {len(counters)} distinct positions')

    records = []
    skipped = 0
    for position_id, counter in counters.items():
        if counter.total() == 0:
            log.warning(f'  {position_id}: no finished games, skipped')
            skipped += 1
            continue
        probs = Probabilities.from_counter(counter)
        if not probs.is_normalized(config.tolerance):
            raise ValueError(f'{position_id}: probabilities do not sum to 1: {probs}')
        records.append(PositionRecord(
            position_id=position_id,
            win=probs.win(),
            win_g=probs.win_gammon,
            lose_g=probs.lose_gammon,
        ))

    n = append_position_records(config.positions_path, records)
    log.info(f'Appended {n} records to {config.positions_path} '
             f'({skipped} skipped) in {time.time() - t0:.1f}s')


if __name__ == '__main__':
    main()
