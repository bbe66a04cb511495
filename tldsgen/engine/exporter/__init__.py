"""Exporters available for the generated list."""

from .base import BaseExporter
from .file_exporter import FORMATS, FileExporter

__all__ = ["BaseExporter", "FORMATS", "FileExporter"]
