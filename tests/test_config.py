"""Tests for DataConfig path resolution and argparse helpers."""

import argparse
import os
import sys
import unittest
from unittest import mock

# Setup paths
script_dir = os.path.dirname(os.path.abspath(__file__))
project_dir = os.path.dirname(script_dir)
sys.path.insert(0, os.path.join(project_dir, "python"))

from bgcoach.config import DATA_DIR_ENV, DataConfig


class TestDataConfig(unittest.TestCase):

    def test_default_is_repo_data_dir(self):
        with mock.patch.dict(os.environ, {DATA_DIR_ENV: ""}):
            config = DataConfig.default()
        self.assertEqual(os.path.basename(config.data_dir), "data")
        self.assertEqual(config.positions_path,
                         os.path.join(config.data_dir, "rollouts.csv"))

    def test_env_override(self):
        with mock.patch.dict(os.environ, {DATA_DIR_ENV: "/tmp/bgcoach-data"}):
            config = DataConfig.default()
        self.assertEqual(config.data_dir, os.path.abspath("/tmp/bgcoach-data"))

    def test_from_args(self):
        parser = argparse.ArgumentParser()
        DataConfig.add_data_args(parser)
        args = parser.parse_args([
            "--data-dir", "/srv/rollouts",
            "--positions", "contact.csv",
            "--inputs-file", "contact-inputs.csv",
        ])
        config = DataConfig.from_args(args)
        self.assertEqual(config.positions_path,
                         os.path.join(os.path.abspath("/srv/rollouts"), "contact.csv"))
        self.assertEqual(config.inputs_path,
                         os.path.join(os.path.abspath("/srv/rollouts"), "contact-inputs.csv"))

    def test_from_args_defaults(self):
        parser = argparse.ArgumentParser()
        DataConfig.add_data_args(parser)
        with mock.patch.dict(os.environ, {DATA_DIR_ENV: "/tmp/elsewhere"}):
            config = DataConfig.from_args(parser.parse_args([]))
        self.assertEqual(config.data_dir, os.path.abspath("/tmp/elsewhere"))
        self.assertEqual(config.inputs_file, "training-inputs.csv")


if __name__ == "__main__":
    unittest.main()
