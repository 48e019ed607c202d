"""
Delivery sinks - hand a finished artifact to the user.

Renderers never deliver anything themselves. A sink receives a complete
ReportArtifact and either stores it (FileDeliverySink) or sends it to a
print surface (PrintSink).

Print sequencing:
1. Open a surface; no surface -> MissingSurfaceError
2. Load the artifact; the surface returns a one-shot ready Future
3. Wait for the Future with a timeout (no infinite wait)
4. Trigger print exactly once

A surface that cannot signal readiness returns None from load(); the sink
then falls back to a short fixed delay before printing.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
import tempfile
import time
from abc import ABC, abstractmethod
from concurrent.futures import CancelledError, Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from pathlib import Path
from typing import Callable, Optional, Union

from utils.config import Config

from .artifact import ExportFormat, MissingSurfaceError, ReportArtifact


logger = logging.getLogger(__name__)


# =============================================================================
# Sink Interface
# =============================================================================


class DeliverySink(ABC):
    """Capability that hands a finished artifact to the user."""

    @abstractmethod
    def deliver(self, artifact: ReportArtifact):
        """Deliver one artifact. Raises an ExportError subclass on failure."""
        pass


class FileDeliverySink(DeliverySink):
    """
    Writes artifacts into a directory.

    The file is written under a temporary name and renamed into place, so
    a failed write never leaves a partial export behind.
    """

    def __init__(self, output_dir: Union[str, Path]):
        self.output_dir = Path(output_dir)

    def deliver(self, artifact: ReportArtifact) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        output_path = self.output_dir / artifact.filename
        partial_path = output_path.with_name(output_path.name + ".part")

        try:
            partial_path.write_bytes(artifact.payload)
            partial_path.replace(output_path)
        except OSError:
            partial_path.unlink(missing_ok=True)
            raise

        logger.info("Saved %s (%d bytes)", output_path, artifact.size_bytes)
        return output_path


# =============================================================================
# Print Surfaces
# =============================================================================


class PrintSurface(ABC):
    """A display/print target that loads a document before printing it."""

    @abstractmethod
    def load(self, artifact: ReportArtifact) -> Optional[Future]:
        """
        Attach the document to the surface.

        Returns a Future that resolves once the document is fully loaded,
        or None when the surface has no load-complete signal.
        """
        pass

    @abstractmethod
    def print_document(self):
        """Trigger the print action. Raises OSError or MissingSurfaceError on failure."""
        pass

    def close(self):
        """Release the surface."""
        pass


class SystemPrintSurface(PrintSurface):
    """Prints through an operating-system print command (e.g. lpr)."""

    def __init__(self, command: str, timeout: float = 30.0):
        self.command = command
        self.timeout = timeout
        self._path: Optional[Path] = None

    def load(self, artifact: ReportArtifact) -> Future:
        ready: Future = Future()
        try:
            fd, path = tempfile.mkstemp(prefix="info_collection_", suffix=f".{artifact.export_format.extension}")
            with os.fdopen(fd, "wb") as fh:
                fh.write(artifact.payload)
        except OSError as e:
            ready.set_exception(e)
            return ready

        self._path = Path(path)
        ready.set_result(self._path)
        return ready

    def print_document(self):
        if self._path is None:
            raise MissingSurfaceError("Nothing has been loaded onto the print surface.")
        argv = shlex.split(self.command) + [str(self._path)]
        try:
            subprocess.run(argv, check=True, capture_output=True, timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            raise MissingSurfaceError(
                f"Print command {self.command!r} did not finish within {self.timeout:.1f}s"
            ) from e
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or b"").decode("utf-8", "replace").strip()
            raise MissingSurfaceError(
                f"Print command {self.command!r} failed with exit code {e.returncode}: {stderr}"
            ) from e

    def close(self):
        if self._path is not None:
            self._path.unlink(missing_ok=True)
            self._path = None


def open_system_print_surface(command: str, timeout: float = 30.0) -> Optional[SystemPrintSurface]:
    """Open a surface for the print command, or None if it is not installed."""
    argv = shlex.split(command)
    if not argv or shutil.which(argv[0]) is None:
        return None
    return SystemPrintSurface(command, timeout=timeout)


# =============================================================================
# Print Sink
# =============================================================================


class PrintSink(DeliverySink):
    """
    Sends a finished PDF artifact to a print surface.

    Usage:
        sink = PrintSink(lambda: open_system_print_surface("lpr"))
        sink.deliver(artifact)
    """

    def __init__(
        self,
        open_surface: Callable[[], Optional[PrintSurface]],
        ready_timeout: float = 10.0,
        fallback_delay: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.open_surface = open_surface
        self.ready_timeout = ready_timeout
        self.fallback_delay = fallback_delay
        self._sleep = sleep

    @classmethod
    def from_config(cls, config: Config) -> "PrintSink":
        return cls(
            lambda: open_system_print_surface(config.print_command, config.print_command_timeout),
            ready_timeout=config.print_ready_timeout,
            fallback_delay=config.print_fallback_delay,
        )

    def deliver(self, artifact: ReportArtifact):
        if artifact.export_format != ExportFormat.PDF:
            raise ValueError(f"Only PDF artifacts can be printed, got {artifact.export_format.extension}")

        surface = self._open()
        try:
            self._wait_until_ready(surface, artifact)
            try:
                surface.print_document()
            except OSError as e:
                logger.error("Print trigger failed for %s: %s", artifact.filename, e)
                raise MissingSurfaceError(f"Print surface failed: {e}") from e
        finally:
            surface.close()

        logger.info("Sent %s to print surface", artifact.filename)

    def _open(self) -> PrintSurface:
        try:
            surface = self.open_surface()
        except OSError as e:
            logger.error("Could not open print surface: %s", e)
            raise MissingSurfaceError(f"Print surface could not be created: {e}") from e

        if surface is None:
            logger.error("No print surface available")
            raise MissingSurfaceError(
                "Print surface could not be created. Allow pop-ups or configure a "
                "print command to print the report."
            )
        return surface

    def _wait_until_ready(self, surface: PrintSurface, artifact: ReportArtifact):
        ready = surface.load(artifact)

        if ready is None:
            logger.warning(
                "Print surface has no ready signal; waiting %.1fs before printing",
                self.fallback_delay,
            )
            self._sleep(self.fallback_delay)
            return

        try:
            ready.result(timeout=self.ready_timeout)
        except FutureTimeoutError as e:
            logger.error("Print surface not ready after %.1fs", self.ready_timeout)
            raise MissingSurfaceError(
                f"Print surface did not finish loading within {self.ready_timeout:.1f}s"
            ) from e
        except CancelledError as e:
            logger.error("Print surface cancelled loading %s", artifact.filename)
            raise MissingSurfaceError("Print surface cancelled loading the report") from e
        except Exception as e:
            logger.error("Print surface failed to load %s: %s", artifact.filename, e)
            raise MissingSurfaceError(f"Print surface failed to load the report: {e}") from e
