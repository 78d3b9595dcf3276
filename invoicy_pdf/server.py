"""HTTP service exposing document rendering."""

from __future__ import annotations

import atexit
import errno
import json
import logging
import multiprocessing as mp
import threading
from concurrent.futures import Future, ProcessPoolExecutor, TimeoutError as FutureTimeoutError
from concurrent.futures.process import BrokenProcessPool
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from .config import (
    LISTEN_BACKLOG,
    MAX_BODY_BYTES as MAX_BODY_BYTES_CONFIG,
    MAX_BUNDLE_ITEMS as MAX_BUNDLE_ITEMS_CONFIG,
    MAX_CONCURRENT_RENDERS,
    MAX_INFLIGHT_RENDERS,
    RENDER_QUEUE_TIMEOUT_MS,
    RENDER_TIMEOUT_MS,
)
from .models import PDF_CONTENT_TYPE

logger = logging.getLogger(__name__)

DOCUMENT_JOB = "document"
BUNDLE_JOB = "bundle"
POST_ROUTES = {
    "/": DOCUMENT_JOB,
    "/render": DOCUMENT_JOB,
    "/pdf": DOCUMENT_JOB,
    "/attachments": BUNDLE_JOB,
}
HEALTH_PATHS = ("/", "/health", "/healthz", "/ready")

ValidationError = Tuple[int, Dict[str, Any]]
RenderJob = Callable[[Mapping[str, Any]], Dict[str, Any]]

DISCONNECT_ERRNOS = {errno.EPIPE, errno.ECONNRESET, errno.ETIMEDOUT}


class DependencyError(RuntimeError):
    """Raised when a required runtime dependency is missing."""


class RenderUnavailable(Exception):
    """A render could not be completed for operational reasons."""

    def __init__(self, status: int, body: Dict[str, Any]) -> None:
        super().__init__(body["detail"])
        self.status = status
        self.body = body


def is_client_disconnect(exc: BaseException) -> bool:
    if isinstance(exc, (BrokenPipeError, ConnectionResetError, TimeoutError)):
        return True
    return isinstance(exc, OSError) and exc.errno in DISCONNECT_ERRNOS


def load_render_jobs() -> Dict[str, RenderJob]:
    try:
        from .rendering import render_bundle_payload, render_document_payload
    except ModuleNotFoundError as exc:
        if exc.name == "fpdf":
            raise DependencyError(
                "Missing dependency 'fpdf'. Install the project with 'pip install -e .'."
            ) from exc
        raise
    return {DOCUMENT_JOB: render_document_payload, BUNDLE_JOB: render_bundle_payload}


class RenderPool:
    """Runs render jobs in spawned worker processes.

    ``slots`` caps renders that are queued or running; a request that cannot
    get a slot within the queue timeout is turned away. The worker pool is
    created lazily and replaced when a worker dies.
    """

    def __init__(
        self,
        workers: int,
        inflight: int,
        queue_timeout_ms: int,
        render_timeout_ms: int,
    ) -> None:
        self.workers = workers
        self.inflight = inflight
        self.queue_timeout_ms = queue_timeout_ms
        self.render_timeout_ms = render_timeout_ms
        self.slots = threading.BoundedSemaphore(inflight)
        self._lock = threading.Lock()
        self._executor: Optional[ProcessPoolExecutor] = None

    def _current(self) -> ProcessPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ProcessPoolExecutor(
                    max_workers=self.workers,
                    mp_context=mp.get_context("spawn"),
                )
            return self._executor

    def _discard(self, broken: ProcessPoolExecutor) -> None:
        with self._lock:
            if self._executor is not broken:
                return
            self._executor = None
        broken.shutdown(wait=False, cancel_futures=True)

    def start(self) -> None:
        self._current()

    def close(self) -> None:
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=False, cancel_futures=True)

    def _submit(self, job: RenderJob, payload: Mapping[str, Any]) -> "Future[Dict[str, Any]]":
        executor = self._current()
        try:
            return executor.submit(job, payload)
        except BrokenProcessPool:
            self._discard(executor)
            return self._current().submit(job, payload)

    def run(self, job: RenderJob, payload: Mapping[str, Any]) -> Dict[str, Any]:
        if not self.slots.acquire(timeout=self.queue_timeout_ms / 1000.0):
            raise RenderUnavailable(
                503,
                {
                    "error": "server_busy",
                    "detail": "Render queue is full; retry shortly.",
                    "retry_after_ms": self.queue_timeout_ms,
                    "retry_after_seconds": max(1, (self.queue_timeout_ms + 999) // 1000),
                    "max_concurrent_renders": self.workers,
                    "max_inflight_renders": self.inflight,
                },
            )
        try:
            future = self._submit(job, payload)
            try:
                return future.result(timeout=self.render_timeout_ms / 1000.0)
            except FutureTimeoutError:
                future.cancel()
                raise RenderUnavailable(
                    504,
                    {
                        "error": "render_timeout",
                        "detail": f"Render exceeded timeout of {self.render_timeout_ms} ms.",
                    },
                )
            except BrokenProcessPool:
                self._discard(self._current())
                raise RenderUnavailable(
                    503,
                    {
                        "error": "render_pool_restarting",
                        "detail": "Render worker pool restarted; retry shortly.",
                    },
                )
        finally:
            self.slots.release()


RENDER_POOL = RenderPool(
    workers=MAX_CONCURRENT_RENDERS,
    inflight=MAX_INFLIGHT_RENDERS,
    queue_timeout_ms=RENDER_QUEUE_TIMEOUT_MS,
    render_timeout_ms=RENDER_TIMEOUT_MS,
)
atexit.register(RENDER_POOL.close)


def _invalid(detail: str) -> ValidationError:
    return 400, {"error": "invalid_payload", "detail": detail}


def check_content_length(header: Optional[str], max_bytes: int) -> Tuple[int, Optional[ValidationError]]:
    """Return the body length to read, or the error to answer with."""
    if header is None:
        return 0, (
            411,
            {"error": "missing_content_length", "detail": "Content-Length header is required."},
        )
    try:
        length = int(header)
    except ValueError:
        return 0, (
            400,
            {"error": "invalid_content_length", "detail": "Content-Length must be an integer."},
        )
    if length <= 0:
        return 0, (400, {"error": "empty_body", "detail": "Request body cannot be empty."})
    if length > max_bytes:
        return 0, (
            413,
            {"error": "payload_too_large", "detail": f"Body exceeds {max_bytes} bytes."},
        )
    return length, None


def parse_json_object(body: bytes) -> Tuple[Optional[Dict[str, Any]], Optional[ValidationError]]:
    try:
        payload = json.loads(body.decode("utf-8"))
    except UnicodeDecodeError:
        return None, (
            400,
            {"error": "invalid_encoding", "detail": "Body must be UTF-8 encoded JSON."},
        )
    except json.JSONDecodeError as exc:
        return None, (
            400,
            {
                "error": "invalid_json",
                "detail": f"{exc.msg} (line {exc.lineno}, column {exc.colno})",
            },
        )

    if not isinstance(payload, dict):
        return None, _invalid("JSON root must be an object.")
    return payload, None


def _company_error(payload: Mapping[str, Any]) -> Optional[ValidationError]:
    for key in ("companyInfo", "company_info"):
        value = payload.get(key)
        if value is not None and not isinstance(value, dict):
            return _invalid(f"'{key}' must be an object.")
    return None


def validate_render_payload(
    body: bytes,
) -> Tuple[Optional[Dict[str, Any]], Optional[ValidationError]]:
    payload, error = parse_json_object(body)
    if payload is None:
        return None, error

    if not isinstance(payload.get("document"), dict):
        return None, _invalid("'document' must be an object.")
    items = payload["document"].get("items")
    if items is not None and not isinstance(items, list):
        return None, _invalid("'document.items' must be an array.")

    error = _company_error(payload)
    if error is not None:
        return None, error
    return payload, None


def validate_bundle_payload(
    body: bytes,
    max_items: int,
) -> Tuple[Optional[Dict[str, Any]], Optional[ValidationError]]:
    payload, error = parse_json_object(body)
    if payload is None:
        return None, error

    bundle = payload.get("bundle")
    if not isinstance(bundle, dict):
        return None, _invalid("'bundle' must be an object.")

    items = bundle.get("items", [])
    if items is None:
        items = []
    if not isinstance(items, list):
        return None, _invalid("'bundle.items' must be an array.")
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            return None, _invalid(f"'bundle.items[{index}]' must be an object.")

    if len(items) > max_items:
        return None, (
            413,
            {
                "error": "bundle_too_large",
                "detail": f"Bundle has {len(items)} items; maximum is {max_items}.",
                "max_items": max_items,
            },
        )

    error = _company_error(payload)
    if error is not None:
        return None, error
    return payload, None


class RenderHandler(BaseHTTPRequestHandler):
    MAX_BODY_BYTES = MAX_BODY_BYTES_CONFIG
    MAX_BUNDLE_ITEMS = MAX_BUNDLE_ITEMS_CONFIG

    def _respond(
        self,
        status: int,
        content_type: str,
        body: bytes,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        try:
            self.send_response(status)
            self.send_header("Content-Type", content_type)
            self.send_header("Content-Length", str(len(body)))
            for name, value in (headers or {}).items():
                self.send_header(name, value)
            self.end_headers()
            self.wfile.write(body)
        except Exception as exc:
            if not is_client_disconnect(exc):
                raise

    def _send_json(self, status: int, payload: Dict[str, Any]) -> None:
        self._respond(status, "application/json", json.dumps(payload).encode("utf-8"))

    def _validate(self, job_name: str, body: bytes):
        if job_name == BUNDLE_JOB:
            return validate_bundle_payload(body, self.MAX_BUNDLE_ITEMS)
        return validate_render_payload(body)

    def do_POST(self) -> None:
        job_name = POST_ROUTES.get(self.path)
        if job_name is None:
            self._send_json(404, {"error": "not_found", "detail": "Unsupported endpoint."})
            return

        length, error = check_content_length(self.headers.get("Content-Length"), self.MAX_BODY_BYTES)
        if error is None:
            try:
                body = self.rfile.read(length)
            except Exception as exc:
                if is_client_disconnect(exc):
                    return
                raise
            payload, error = self._validate(job_name, body)
        if error is not None:
            self._send_json(*error)
            return

        job = load_render_jobs()[job_name]
        try:
            result = RENDER_POOL.run(job, payload)
        except RenderUnavailable as exc:
            self._send_json(exc.status, exc.body)
            return
        except Exception as exc:
            logger.exception("Render failed for %s", self.path)
            self._send_json(500, {"error": "render_failed", "detail": str(exc)})
            return

        if job_name == BUNDLE_JOB:
            self._send_json(200, result)
            return
        disposition = f'attachment; filename="{result["filename"]}"'
        self._respond(200, PDF_CONTENT_TYPE, result["content"], {"Content-Disposition": disposition})

    def do_GET(self) -> None:
        if self.path in HEALTH_PATHS:
            self._send_json(200, {"status": "ok"})
            return
        self._send_json(404, {"error": "not_found", "detail": "Unsupported endpoint."})

    def handle_one_request(self) -> None:
        try:
            super().handle_one_request()
        except Exception as exc:
            if not is_client_disconnect(exc):
                raise

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug("%s - %s", self.address_string(), format % args)


class RenderHTTPServer(ThreadingHTTPServer):
    daemon_threads = True
    allow_reuse_address = True
    request_queue_size = LISTEN_BACKLOG


def run(host: str = "0.0.0.0", port: int = 8080) -> None:
    load_render_jobs()
    RENDER_POOL.start()
    server = RenderHTTPServer((host, port), RenderHandler)
    logger.info("Document render service listening on http://%s:%s", host, port)
    server.serve_forever()
