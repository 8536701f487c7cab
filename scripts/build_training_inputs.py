"""
Expand the position records file into training inputs.

Every record is turned back into all four probabilities, its board is
decoded from the position ID, and the input vector comes from a generator
object with an ``inputs_for(board)`` method, loaded from ``--inputs``.

Usage:
    python build_training_inputs.py --inputs mynets.encoding:TesauroInputs
    python build_training_inputs.py --inputs mynets.encoding:TesauroInputs --npz data/contact.npz
"""

import os
import sys
import time
import logging
import argparse
import importlib

script_dir = os.path.dirname(os.path.abspath(__file__))
project_dir = os.path.dirname(script_dir)
sys.path.insert(0, os.path.join(project_dir, 'python'))

import numpy as np

from bgcoach import (
    DataConfig,
    GnubgPositionIds,
    expand_position_records,
    training_arrays,
    write_inputs_records,
)

log = logging.getLogger('build_training_inputs')


def load_inputs_generator(spec):
    """Import ``module:attribute``; classes are instantiated without arguments."""
    module_name, sep, attr = spec.partition(':')
    if not sep or not module_name or not attr:
        raise ValueError(f"--inputs must look like 'module:attribute', got {spec!r}")
    obj = getattr(importlib.import_module(module_name), attr)
    if isinstance(obj, type):
        obj = obj()
    if not callable(getattr(obj, 'inputs_for', None)):
        raise TypeError(f'{spec} has no inputs_for(position) method')
    return obj


def main():
    parser = argparse.ArgumentParser(description=__doc__.split('\n\n')[0].strip())
    parser.add_argument('--inputs', type=str, required=True,
                        help="Inputs generator as 'module:attribute'")
    parser.add_argument('--npz', type=str, default='',
                        help='Write numpy arrays (inputs, targets) to this .npz instead of CSV')
    DataConfig.add_data_args(parser)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format='[%(asctime)s] %(message)s',
                        datefmt='%Y-%m-%d %H:%M:%S')

    config = DataConfig.from_args(args)
    inputs_gen = load_inputs_generator(args.inputs)
    codec = GnubgPositionIds()

    log.info(f'Reading {config.positions_path}...')
    t0 = time.time()
    records = expand_position_records(config.positions_path, inputs_gen, codec)
    log.info(f'  Expanded {len(records)} records in {time.time() - t0:.1f}s')

    if args.npz:
        inputs, targets = training_arrays(records)
        np.savez_compressed(args.npz, inputs=inputs, targets=targets)
        log.info(f'Wrote inputs {inputs.shape} and targets {targets.shape} to {args.npz}')
    else:
        config.ensure_dir()
        n = write_inputs_records(config.inputs_path, records)
        log.info(f'Wrote {n} records to {config.inputs_path}')


if __name__ == '__main__':
    main()
