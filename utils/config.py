"""
Configuration management.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass
class Config:
    """
    Application configuration.

    Loads from environment variables with sensible defaults.
    The export engine never reads the environment itself; callers
    build a Config and pass it in.
    """

    # Server
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))
    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")

    # Report text
    report_title: str = field(
        default_factory=lambda: os.getenv("REPORT_TITLE", "Info Collection Report")
    )
    print_title: str = field(
        default_factory=lambda: os.getenv("PRINT_TITLE", "Candidate Intake Form")
    )
    csv_placeholder: str = field(default_factory=lambda: os.getenv("CSV_PLACEHOLDER", ""))

    # PDF fonts (Chinese falls back to STSong-Light; other scripts need a TTF path)
    pdf_font_name: str = field(default_factory=lambda: os.getenv("PDF_FONT_NAME", "Helvetica"))
    pdf_font_path: Optional[str] = field(default_factory=lambda: os.getenv("PDF_FONT_PATH") or None)

    # Delivery
    output_dir: str = field(default_factory=lambda: os.getenv("EXPORT_DIR", "./exports"))
    print_command: str = field(default_factory=lambda: os.getenv("PRINT_COMMAND", "lpr"))
    print_ready_timeout: float = field(
        default_factory=lambda: float(os.getenv("PRINT_READY_TIMEOUT", "10.0"))
    )
    print_fallback_delay: float = field(
        default_factory=lambda: float(os.getenv("PRINT_FALLBACK_DELAY", "0.5"))
    )
    print_command_timeout: float = field(
        default_factory=lambda: float(os.getenv("PRINT_COMMAND_TIMEOUT", "30.0"))
    )

    @classmethod
    def load(cls) -> "Config":
        """Load configuration from environment."""
        return cls()

    @property
    def output_path(self) -> Path:
        return Path(self.output_dir)

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "report_title": self.report_title,
            "print_title": self.print_title,
            "csv_placeholder": self.csv_placeholder,
            "pdf_font_name": self.pdf_font_name,
            "pdf_font_path": self.pdf_font_path,
            "output_dir": self.output_dir,
            "print_command": self.print_command,
            "print_ready_timeout": self.print_ready_timeout,
            "print_fallback_delay": self.print_fallback_delay,
            "print_command_timeout": self.print_command_timeout,
        }
