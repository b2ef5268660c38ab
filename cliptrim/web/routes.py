"""Web API routes for ClipTrim.

A job is one uploaded file. Ranges are resolved on request, before any
background work starts, so a bad expression is answered with a 400 rather
than surfacing later as a failed job.
"""

import json
import queue
import subprocess
import threading
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path

from flask import Blueprint, Response, abort, current_app, jsonify, request, send_file

from cliptrim.engine import plan_trim, process
from cliptrim.manifest import Manifest, default_output, time_field
from cliptrim.models import TrimPlan

bp = Blueprint("web", __name__, url_prefix="/api")


@dataclass
class TrimJob:
    job_id: str
    input_path: Path
    filename: str
    status: str = "uploaded"
    plan: TrimPlan | None = None
    media_duration: Decimal | None = None
    error: str | None = None
    events: queue.Queue | None = field(default=None, repr=False)

    @property
    def output_path(self) -> Path:
        return self.input_path.with_name(f"output{self.input_path.suffix}")

    def describe(self) -> dict:
        info = {"job_id": self.job_id, "status": self.status, "filename": self.filename}
        if self.plan is not None:
            info["plan"] = plan_json(self.plan, self.media_duration)
        if self.error:
            info["error"] = self.error
        return info


_jobs: dict[str, TrimJob] = {}


def plan_json(plan: TrimPlan, media_duration: Decimal | None) -> dict:
    start, length = plan.as_args()
    return {
        "start": start,
        "duration": length,
        "finish": str(plan.finish_sec),
        "media_duration": None if media_duration is None else str(media_duration),
    }


def _get_job(job_id: str) -> TrimJob:
    job = _jobs.get(job_id)
    if job is None:
        abort(404, description=f"Job {job_id} not found")
    return job


def _requested_range(job: TrimJob) -> Manifest:
    body = request.get_json(silent=True) or {}
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    return Manifest(
        input=job.input_path,
        output=job.output_path,
        start=time_field(body, "start"),
        finish=time_field(body, "finish"),
        copy_streams=bool(body.get("copy_streams", True)),
        overwrite=True,
    )


def _resolve_for(job: TrimJob) -> Manifest:
    """Resolve the posted range against the job's media and remember the plan."""
    manifest = _requested_range(job)
    job.plan, job.media_duration = plan_trim(manifest)
    return manifest


@bp.post("/upload")
def upload():
    f = request.files.get("file")
    if f is None:
        abort(400, description="No file provided")
    if not f.filename:
        abort(400, description="Empty filename")

    job_id = uuid.uuid4().hex[:12]
    job_dir = Path(current_app.config["WORK_DIR"]) / job_id
    job_dir.mkdir(parents=True, exist_ok=True)
    input_path = job_dir / f"input{Path(f.filename).suffix or '.mp4'}"
    f.save(input_path)

    _jobs[job_id] = TrimJob(job_id=job_id, input_path=input_path, filename=f.filename)
    return jsonify({"job_id": job_id, "filename": f.filename})


@bp.post("/jobs/<job_id>/plan")
def plan(job_id: str):
    job = _get_job(job_id)
    _resolve_for(job)
    return jsonify(plan_json(job.plan, job.media_duration))


@bp.post("/jobs/<job_id>/trim")
def start_trim(job_id: str):
    job = _get_job(job_id)
    if job.status == "trimming":
        abort(409, description="Job is already trimming")

    manifest = _resolve_for(job)
    events: queue.Queue = queue.Queue()
    job.events, job.status, job.error = events, "trimming", None

    def run():
        try:
            process(manifest, on_progress=lambda stage, frac: events.put(
                {"stage": stage, "progress": round(frac, 3)}
            ))
            job.status = "done"
        except subprocess.CalledProcessError as e:
            lines = (e.stderr or "").strip().splitlines()
            job.status, job.error = "error", f"ffmpeg failed: {lines[-1]}" if lines else str(e)
        except Exception as e:
            job.status, job.error = "error", str(e)
        finally:
            events.put(None)

    threading.Thread(target=run, daemon=True).start()
    return jsonify({"status": "started", "plan": plan_json(job.plan, job.media_duration)})


@bp.get("/jobs/<job_id>/progress")
def progress_stream(job_id: str):
    job = _get_job(job_id)
    events = job.events
    if events is None:
        abort(409, description="Job has not been trimmed")

    def generate():
        while True:
            try:
                msg = events.get(timeout=120)
            except queue.Empty:
                yield "event: error\ndata: {\"error\": \"timeout\"}\n\n"
                return
            if msg is not None:
                yield f"event: progress\ndata: {json.dumps(msg)}\n\n"
                continue
            kind = "error" if job.status == "error" else "done"
            yield f"event: {kind}\ndata: {json.dumps(job.describe())}\n\n"
            return

    return Response(generate(), mimetype="text/event-stream")


@bp.get("/jobs/<job_id>/status")
def job_status(job_id: str):
    return jsonify(_get_job(job_id).describe())


@bp.get("/jobs/<job_id>/result")
def download_result(job_id: str):
    job = _get_job(job_id)
    if job.status != "done":
        abort(409, description="Trim not complete")
    return send_file(
        job.output_path,
        as_attachment=True,
        download_name=default_output(Path(job.filename)).name,
    )
