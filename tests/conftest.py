"""Shared test fixtures."""

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures"

PROBE_JSON = {
    "format": {"duration": "100.000000", "format_name": "mov,mp4,m4a,3gp,3g2,mj2"},
    "streams": [
        {"codec_type": "video", "codec_name": "h264"},
        {"codec_type": "audio", "codec_name": "aac"},
    ],
}


@pytest.fixture
def sample_manifest_path() -> Path:
    return FIXTURES_DIR / "sample_manifest.json"


@pytest.fixture
def probe_output() -> MagicMock:
    """A CompletedProcess-like result for a 100 second mp4."""
    return MagicMock(returncode=0, stdout=json.dumps(PROBE_JSON), stderr="")


@pytest.fixture
def media_100s():
    """Stub ffmpeg lookup and probing so ranges resolve against 100 s of media."""
    from decimal import Decimal
    from unittest.mock import patch

    from cliptrim.models import ProbeResult

    result = ProbeResult(duration=Decimal("100.0"), format_name="mp4", has_video=True, has_audio=True)
    with patch("cliptrim.engine.ffutil.check_ffmpeg") as check, \
         patch("cliptrim.engine.ffutil.probe", return_value=result) as probe:
        yield check, probe
