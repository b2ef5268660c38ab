"""Tests for the engine module."""

from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

import pytest

from cliptrim.engine import EngineResult, plan_trim, process
from cliptrim.errors import ConflictingRelativityError, NegativeDurationError
from cliptrim.ffutil import FFmpegNotFoundError
from cliptrim.manifest import Manifest
from cliptrim.models import ProbeResult, TrimPlan

PROBE = ProbeResult(duration=Decimal("100.0"), format_name="mp4", has_video=True, has_audio=True)


@pytest.fixture
def mock_ffutil():
    with patch("cliptrim.engine.ffutil.check_ffmpeg"), \
         patch("cliptrim.engine.ffutil.probe", return_value=PROBE) as probe, \
         patch("cliptrim.engine.ffutil.trim") as trim:
        yield probe, trim


class TestEngineResult:
    def test_defaults(self):
        r = EngineResult(output_path=Path("out.mp4"), plan=TrimPlan(Decimal(0), Decimal(1)))
        assert r.duration_original == 0
        assert r.command is None
        assert r.dry_run is False


class TestPlanTrim:
    def test_resolves_against_probe(self, mock_ffutil):
        m = Manifest(input=Path("in.mp4"), output=Path("out.mp4"), start="-5", finish="-10")
        plan, duration = plan_trim(m)
        assert duration == 100
        assert plan.as_args() == ("85.0", "5.0")

    @patch("cliptrim.engine.ffutil.probe")
    @patch("cliptrim.engine.ffutil.check_ffmpeg", side_effect=FFmpegNotFoundError("ffprobe not found on PATH"))
    def test_checks_ffmpeg_before_probing(self, mock_check, mock_probe):
        m = Manifest(input=Path("in.mp4"), output=Path("out.mp4"))
        with pytest.raises(FFmpegNotFoundError):
            plan_trim(m)
        mock_probe.assert_not_called()


class TestProcess:
    def test_trims(self, mock_ffutil, tmp_path):
        probe, trim = mock_ffutil
        m = Manifest(input=tmp_path / "in.mp4", output=tmp_path / "out.mp4", start="10", finish="+5")
        stages = []

        result = process(m, on_progress=lambda stage, frac: stages.append((stage, frac)))

        trim.assert_called_once()
        args, kwargs = trim.call_args
        assert args[0] == m.input
        assert args[1] == m.output
        assert args[2].as_args() == ("10.0", "5.0")
        assert kwargs["copy_streams"] is True
        assert result.output_path == m.output
        assert result.duration_original == 100
        assert stages[0][1] == 0.0
        assert stages[-1] == ("Done", 1.0)

    def test_dry_run_skips_ffmpeg(self, mock_ffutil, tmp_path):
        _, trim = mock_ffutil
        m = Manifest(input=tmp_path / "in.mp4", output=tmp_path / "out.mp4", finish="-20")
        result = process(m, dry_run=True)
        trim.assert_not_called()
        assert result.dry_run
        assert result.command[result.command.index("-t") + 1] == "80.0"

    @pytest.mark.parametrize(
        "start, finish, error",
        [("-5", "+10", ConflictingRelativityError), ("50", "10", NegativeDurationError)],
    )
    def test_errors_abort_before_trim(self, mock_ffutil, tmp_path, start, finish, error):
        _, trim = mock_ffutil
        m = Manifest(input=tmp_path / "in.mp4", output=tmp_path / "out.mp4", start=start, finish=finish)
        with pytest.raises(error):
            process(m)
        trim.assert_not_called()

    def test_existing_output_refused(self, mock_ffutil, tmp_path):
        _, trim = mock_ffutil
        out = tmp_path / "out.mp4"
        out.write_bytes(b"old")
        m = Manifest(input=tmp_path / "in.mp4", output=out)
        with pytest.raises(FileExistsError):
            process(m)
        trim.assert_not_called()

    def test_existing_output_overwritten_when_asked(self, mock_ffutil, tmp_path):
        _, trim = mock_ffutil
        out = tmp_path / "out.mp4"
        out.write_bytes(b"old")
        m = Manifest(input=tmp_path / "in.mp4", output=out, overwrite=True)
        process(m)
        trim.assert_called_once()

    def test_output_same_as_input_refused(self, mock_ffutil, tmp_path):
        m = Manifest(input=tmp_path / "in.mp4", output=tmp_path / "in.mp4", overwrite=True)
        with pytest.raises(ValueError, match="overwrite the input"):
            process(m)
