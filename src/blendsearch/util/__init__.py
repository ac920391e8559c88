import os
from pathlib import Path

from blendsearch.util.yaml import load_yaml_config, load_yaml_data

PROJECT_ROOT = Path(os.environ.get("BLENDSEARCH_ROOT", Path.cwd()))

__all__ = ["PROJECT_ROOT", "load_yaml_config", "load_yaml_data"]
