"""Flask application factory for the ClipTrim web API.

Every error leaves the API as ``{"error": ..., "kind": ...}`` so clients can
tell a bad time expression apart from a missing job or an ffmpeg failure.
"""

import subprocess
import tempfile
from pathlib import Path

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from cliptrim.errors import TrimError
from cliptrim.ffutil import FFmpegNotFoundError, ProbeError


def _error(message: str, kind: str, status: int):
    return jsonify({"error": message, "kind": kind}), status


def create_app(work_dir: Path | None = None) -> Flask:
    app = Flask(__name__)
    app.config["WORK_DIR"] = work_dir or Path(tempfile.mkdtemp(prefix="cliptrim_"))
    app.config["MAX_CONTENT_LENGTH"] = 10 * 1024 * 1024 * 1024  # 10 GB

    from cliptrim.web.routes import bp
    app.register_blueprint(bp)

    @app.errorhandler(HTTPException)
    def http_error(error: HTTPException):
        return _error(error.description, type(error).__name__, error.code)

    # TrimError is a ValueError, so the subclass handler must stay registered too.
    @app.errorhandler(TrimError)
    def bad_range(error: TrimError):
        return _error(str(error), type(error).__name__, 400)

    @app.errorhandler(ValueError)
    def bad_request(error: ValueError):
        return _error(str(error), "InvalidRequest", 400)

    @app.errorhandler(ProbeError)
    @app.errorhandler(subprocess.CalledProcessError)
    def unreadable_media(error: Exception):
        return _error("ffprobe could not read the uploaded file", "ProbeError", 422)

    @app.errorhandler(FFmpegNotFoundError)
    def ffmpeg_missing(error: FFmpegNotFoundError):
        return _error(str(error), "FFmpegNotFoundError", 503)

    return app
