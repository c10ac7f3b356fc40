import os
import re
from unittest.mock import MagicMock, patch

import pytest

from .models import ErrorKind
from .rules import Finding
from .sandbox import lint_descriptor, scratch_file


def test_scratch_file_written_then_removed(tmp_path):
    with scratch_file(str(tmp_path), '{"a": 1}') as path:
        assert re.fullmatch(r"[0-9a-f]{16}\.json", os.path.basename(path))
        assert os.path.dirname(path) == str(tmp_path)
        with open(path, encoding="utf-8") as f:
            assert f.read() == '{"a": 1}'

    assert os.listdir(tmp_path) == []


def test_scratch_file_removed_on_error(tmp_path):
    with pytest.raises(RuntimeError):
        with scratch_file(str(tmp_path), "{}"):
            raise RuntimeError("checker crashed")

    assert os.listdir(tmp_path) == []


def test_scratch_dir_created(tmp_path):
    directory = tmp_path / "nested" / "scratch"
    with scratch_file(str(directory), "{}") as path:
        assert os.path.exists(path)
    assert os.listdir(directory) == []


def test_names_are_unique(tmp_path):
    with scratch_file(str(tmp_path), "{}") as first, scratch_file(str(tmp_path), "{}") as second:
        assert first != second


@patch("nft_linter.sandbox.secrets.token_hex", return_value="0" * 16)
def test_existing_file_never_overwritten_or_removed(mock_token, tmp_path):
    existing = tmp_path / ("0" * 16 + ".json")
    existing.write_text("other request")

    with pytest.raises(FileExistsError):
        with scratch_file(str(tmp_path), "{}"):
            pass

    assert existing.read_text() == "other request"


def test_lint_descriptor_passes_clean_document(tmp_path, sample_descriptor):
    engine = MagicMock()
    engine.lint_file.return_value = []

    assert lint_descriptor(sample_descriptor, engine, str(tmp_path)) is None
    engine.lint_file.assert_called_once()
    assert os.listdir(tmp_path) == []


def test_lint_descriptor_reports_findings(tmp_path, sample_descriptor):
    seen = {}

    def lint_file(path):
        with open(path, encoding="utf-8") as f:
            seen["content"] = f.read()
        return [Finding("no-script-tag", 3, 5, "Script tags are not allowed.")]

    engine = MagicMock()
    engine.lint_file.side_effect = lint_file

    failure = lint_descriptor(sample_descriptor, engine, str(tmp_path))

    assert failure.kind == ErrorKind.POLICY_VIOLATION
    assert failure.message == "JSON fails linting checks"
    assert seen["content"].startswith('{\n  "filehash": ')
    assert os.listdir(tmp_path) == []


def test_lint_descriptor_engine_crash_propagates_and_cleans_up(tmp_path, sample_descriptor):
    engine = MagicMock()
    engine.lint_file.side_effect = OSError("read failed")

    with pytest.raises(OSError):
        lint_descriptor(sample_descriptor, engine, str(tmp_path))
    assert os.listdir(tmp_path) == []
