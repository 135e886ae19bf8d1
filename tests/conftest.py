"""Root conftest: shared test configuration."""

import os

# Keep tests away from a developer's real catalog document
os.environ.setdefault("FENGSHUI_DATA_FILE", "test-data/fengShuiData.json")
os.environ.setdefault("FENGSHUI_LOG_FORMAT", "text")
