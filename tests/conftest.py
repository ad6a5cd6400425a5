# ABOUTME: Shared pytest fixtures for ai-assist-stats tests.
# ABOUTME: Provides log directory builders and sample log lines.

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

PRIMARY_CODE_LINE = (
    "2025-03-04 10:00:01,123 [ 1234]   INFO - "
    "com.alibabacloud.intellij.cosy.editor.CosyEditorActionHandler - execute action:EditorTab"
)
PRIMARY_QUERY_LINE = "2025-03-04 Select model is gpt4"
SECONDARY_CODE_LINE = (
    "2025-03-04 11:00:00 POST "
    "https://proxy.individual.githubcopilot.com/v1/engines/copilot-codex/completions 200"
)
SECONDARY_QUERY_LINE = (
    "2025-03-04 11:05:00 POST https://api.individual.githubcopilot.com/chat/completions 200"
)


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    """Create an empty log directory."""
    logs = tmp_path / "logs"
    logs.mkdir()
    return logs


@pytest.fixture
def write_log(log_dir: Path) -> Callable[..., Path]:
    """Return a helper that writes lines to a file under the log directory.

    The file name is relative to the log directory; parent dirs are created.
    """

    def _write(name: str, *lines: str) -> Path:
        path = log_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def marker_lines() -> dict[str, str]:
    """One log line per behavior marker, all dated 2025-03-04."""
    return {
        "primary_code": PRIMARY_CODE_LINE,
        "primary_query": PRIMARY_QUERY_LINE,
        "secondary_code": SECONDARY_CODE_LINE,
        "secondary_query": SECONDARY_QUERY_LINE,
    }
