"""Global test fixtures."""

import os

# Keep a developer's YAML config or log file out of the test run.
# This must happen at module load time, before any test module builds a Config
os.environ.pop("BDP_CONFIG_FILE", None)
os.environ.pop("BDP_LOG_FILE", None)
