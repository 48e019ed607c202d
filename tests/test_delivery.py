"""
Tests for Delivery Sinks

Tests covering:
1. File sink writes the complete artifact and no partial file
2. Missing print surface
3. Ready signal timeout and load failure
4. Fixed-delay fallback when the surface has no ready signal
5. Print fires exactly once and the surface is always released
6. Cancelled or failed ready signals and hung print commands
"""

import subprocess
from concurrent.futures import Future
from datetime import datetime

import pytest

from reporting import (
    ExportFormat,
    FileDeliverySink,
    MissingSurfaceError,
    PrintSink,
    PrintSurface,
    ReportArtifact,
    open_system_print_surface,
)
from reporting.delivery import SystemPrintSurface
from utils.config import Config


GENERATED_AT = datetime(2024, 3, 9, 15, 30)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def pdf_artifact():
    return ReportArtifact(
        export_format=ExportFormat.PDF,
        filename="info_collection_2024-03-09.pdf",
        payload=b"%PDF-1.4 test",
        field_count=2,
        page_count=1,
    )


@pytest.fixture
def csv_artifact():
    return ReportArtifact(
        export_format=ExportFormat.CSV,
        filename="info_collection_2024-03-09.csv",
        payload=b'\xef\xbb\xbf"Category"\n',
        field_count=0,
    )


class FakeSurface(PrintSurface):
    """Records calls; load() returns whatever ready signal it was given."""

    def __init__(self, ready=None, print_error=None):
        self.ready = ready
        self.print_error = print_error
        self.loaded = []
        self.print_calls = 0
        self.closed = False

    def load(self, artifact):
        self.loaded.append(artifact.filename)
        return self.ready

    def print_document(self):
        self.print_calls += 1
        if self.print_error is not None:
            raise self.print_error

    def close(self):
        self.closed = True


def resolved_future():
    ready = Future()
    ready.set_result(True)
    return ready


# =============================================================================
# Test: File Delivery
# =============================================================================


class TestFileDeliverySink:
    """Saving artifacts to disk."""

    def test_writes_payload(self, tmp_path, pdf_artifact):
        path = FileDeliverySink(tmp_path).deliver(pdf_artifact)
        assert path == tmp_path / "info_collection_2024-03-09.pdf"
        assert path.read_bytes() == pdf_artifact.payload

    def test_no_partial_file_left(self, tmp_path, csv_artifact):
        FileDeliverySink(tmp_path).deliver(csv_artifact)
        assert [p.name for p in tmp_path.iterdir()] == ["info_collection_2024-03-09.csv"]

    def test_creates_output_dir(self, tmp_path, csv_artifact):
        target = tmp_path / "nested" / "exports"
        path = FileDeliverySink(target).deliver(csv_artifact)
        assert path.parent == target
        assert path.exists()

    def test_overwrites_same_day_export(self, tmp_path, pdf_artifact):
        sink = FileDeliverySink(tmp_path)
        sink.deliver(pdf_artifact)
        newer = ReportArtifact(ExportFormat.PDF, pdf_artifact.filename, b"%PDF-1.4 newer", 2, 1)
        path = sink.deliver(newer)
        assert path.read_bytes() == b"%PDF-1.4 newer"


# =============================================================================
# Test: Print Delivery
# =============================================================================


class TestPrintSink:
    """Print sequencing: open, wait for ready, print once."""

    def test_missing_surface(self, pdf_artifact):
        sink = PrintSink(lambda: None)
        with pytest.raises(MissingSurfaceError):
            sink.deliver(pdf_artifact)

    def test_surface_open_failure(self, pdf_artifact):
        def blocked():
            raise PermissionError("pop-up blocked")

        with pytest.raises(MissingSurfaceError) as exc_info:
            PrintSink(blocked).deliver(pdf_artifact)
        assert isinstance(exc_info.value.__cause__, PermissionError)

    def test_prints_once_when_ready(self, pdf_artifact):
        surface = FakeSurface(ready=resolved_future())
        PrintSink(lambda: surface).deliver(pdf_artifact)

        assert surface.loaded == [pdf_artifact.filename]
        assert surface.print_calls == 1
        assert surface.closed

    def test_ready_timeout(self, pdf_artifact):
        surface = FakeSurface(ready=Future())
        sink = PrintSink(lambda: surface, ready_timeout=0.01)

        with pytest.raises(MissingSurfaceError) as exc_info:
            sink.deliver(pdf_artifact)

        assert "did not finish loading" in str(exc_info.value)
        assert surface.print_calls == 0
        assert surface.closed

    def test_load_failure(self, pdf_artifact):
        ready = Future()
        ready.set_exception(OSError("disk full"))
        surface = FakeSurface(ready=ready)

        with pytest.raises(MissingSurfaceError):
            PrintSink(lambda: surface).deliver(pdf_artifact)
        assert surface.print_calls == 0
        assert surface.closed

    def test_cancelled_ready_signal(self, pdf_artifact):
        ready = Future()
        ready.cancel()
        surface = FakeSurface(ready=ready)

        with pytest.raises(MissingSurfaceError):
            PrintSink(lambda: surface).deliver(pdf_artifact)
        assert surface.print_calls == 0
        assert surface.closed

    def test_ready_signal_with_unexpected_error(self, pdf_artifact):
        ready = Future()
        ready.set_exception(RuntimeError("viewer crashed"))
        surface = FakeSurface(ready=ready)

        with pytest.raises(MissingSurfaceError) as exc_info:
            PrintSink(lambda: surface).deliver(pdf_artifact)
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert surface.print_calls == 0

    def test_fallback_delay_without_ready_signal(self, pdf_artifact):
        delays = []
        surface = FakeSurface(ready=None)
        sink = PrintSink(lambda: surface, fallback_delay=0.5, sleep=delays.append)

        sink.deliver(pdf_artifact)

        assert delays == [0.5]
        assert surface.print_calls == 1

    def test_no_delay_with_ready_signal(self, pdf_artifact):
        delays = []
        surface = FakeSurface(ready=resolved_future())
        PrintSink(lambda: surface, sleep=delays.append).deliver(pdf_artifact)
        assert delays == []

    def test_print_failure(self, pdf_artifact):
        surface = FakeSurface(ready=resolved_future(), print_error=OSError("printer offline"))
        with pytest.raises(MissingSurfaceError):
            PrintSink(lambda: surface).deliver(pdf_artifact)
        assert surface.print_calls == 1
        assert surface.closed

    def test_rejects_non_pdf(self, csv_artifact):
        surface = FakeSurface(ready=resolved_future())
        with pytest.raises(ValueError):
            PrintSink(lambda: surface).deliver(csv_artifact)
        assert surface.loaded == []


# =============================================================================
# Test: System Print Surface
# =============================================================================


class TestSystemPrintSurface:
    """Operating-system print command."""

    def test_missing_command(self):
        assert open_system_print_surface("definitely-not-a-print-command-xyz") is None

    def test_empty_command(self):
        assert open_system_print_surface("") is None

    def test_load_writes_temp_file(self, pdf_artifact):
        surface = SystemPrintSurface("true")
        ready = surface.load(pdf_artifact)
        path = ready.result(timeout=1)
        try:
            assert path.read_bytes() == pdf_artifact.payload
            assert path.suffix == ".pdf"
        finally:
            surface.close()
        assert not path.exists()

    def test_print_before_load(self):
        with pytest.raises(MissingSurfaceError):
            SystemPrintSurface("true").print_document()

    def test_print_command_timeout(self, pdf_artifact, monkeypatch):
        calls = []

        def hung_command(argv, **kwargs):
            calls.append(kwargs)
            raise subprocess.TimeoutExpired(argv, kwargs["timeout"])

        monkeypatch.setattr("reporting.delivery.subprocess.run", hung_command)
        surface = SystemPrintSurface("lpr", timeout=2.0)
        surface.load(pdf_artifact)
        try:
            with pytest.raises(MissingSurfaceError) as exc_info:
                surface.print_document()
        finally:
            surface.close()

        assert calls[0]["timeout"] == 2.0
        assert "did not finish within 2.0s" in str(exc_info.value)

    def test_timeout_from_config(self, monkeypatch):
        monkeypatch.setattr("reporting.delivery.shutil.which", lambda name: f"/usr/bin/{name}")
        sink = PrintSink.from_config(Config(print_command="lpr -P office", print_command_timeout=7.5))
        surface = sink.open_surface()
        assert surface.command == "lpr -P office"
        assert surface.timeout == 7.5
