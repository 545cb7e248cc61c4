"""
Unit tests for backend/flashcard_api/routes/utils.py
Tests: multipart → Submission conversion, empty uploads, cancellation of
in-flight work when the client disconnects.
Requests and uploads are lightweight fakes — no HTTP stack.
"""

import sys
import os
import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock

BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "backend"))
sys.path.insert(0, BACKEND_DIR)

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-unit-tests-only-32chars!")

from flashcard_api.routes.utils import ClientDisconnected, read_submission, run_until_disconnected
from flashcard_api.services.flashcard.errors import ValidationError


def _upload(filename, content_type, data):
    upload = MagicMock()
    upload.filename = filename
    upload.content_type = content_type
    upload.size = len(data)
    upload.read = AsyncMock(return_value=data)
    return upload


def _request(disconnected):
    request = MagicMock()
    request.is_disconnected = AsyncMock(return_value=disconnected)
    return request


# ────────────────────────────────────────────────────────────────────────────
# read_submission
# ────────────────────────────────────────────────────────────────────────────

class TestReadSubmission:

    @pytest.mark.asyncio
    async def test_notes_only(self):
        sub = await read_submission("some notes", None)
        assert sub.notes == "some notes"
        assert sub.image is None and sub.audio is None

    @pytest.mark.asyncio
    async def test_image_upload(self):
        sub = await read_submission(None, _upload("a.png", "image/png", b"png-bytes"))
        assert sub.image == b"png-bytes"
        assert sub.image_mime_type == "image/png"
        assert sub.audio is None

    @pytest.mark.asyncio
    async def test_audio_upload_keeps_notes(self):
        sub = await read_submission("typed", _upload("v.webm", "audio/webm", b"webm"))
        assert sub.audio == b"webm"
        assert sub.audio_mime_type == "audio/webm"
        assert sub.notes == "typed"

    @pytest.mark.asyncio
    async def test_generic_content_type_sniffed_from_extension(self):
        sub = await read_submission(None, _upload("memo.mp3", "application/octet-stream", b"mp3"))
        assert sub.audio_mime_type == "audio/mpeg"

    @pytest.mark.asyncio
    async def test_empty_upload_is_absent(self):
        sub = await read_submission("n", _upload("", "application/octet-stream", b""))
        assert sub.image is None and sub.audio is None

    @pytest.mark.asyncio
    async def test_unsupported_upload_raises(self):
        with pytest.raises(ValidationError):
            await read_submission(None, _upload("doc.pdf", "application/pdf", b"%PDF"))


# ────────────────────────────────────────────────────────────────────────────
# run_until_disconnected
# ────────────────────────────────────────────────────────────────────────────

class TestRunUntilDisconnected:

    @pytest.mark.asyncio
    async def test_returns_result_when_connected(self):
        async def work():
            return "done"
        assert await run_until_disconnected(_request(False), work(), poll_interval=0.01) == "done"

    @pytest.mark.asyncio
    async def test_propagates_work_exception(self):
        async def work():
            raise RuntimeError("boom")
        with pytest.raises(RuntimeError):
            await run_until_disconnected(_request(False), work(), poll_interval=0.01)

    @pytest.mark.asyncio
    async def test_cancels_work_on_disconnect(self):
        started = asyncio.Event()
        cancelled = asyncio.Event()

        async def work():
            started.set()
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.set()
                raise

        with pytest.raises(ClientDisconnected):
            await run_until_disconnected(_request(True), work(), poll_interval=0.01)
        await asyncio.sleep(0.05)
        assert started.is_set()
        assert cancelled.is_set()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
