"""Thin adapter: GUI settings/form values -> fileconv options and controller"""

from __future__ import annotations

from fileconv.api import ConversionKind, ConverterOptions
from fileconv.runner import JobController, ProgressReporter

from desktop.app.config.settings import AppSettings


def build_options(settings: AppSettings) -> ConverterOptions:
    """Map persisted preferences to ConverterOptions."""
    return ConverterOptions(
        workers=settings.worker_count,
        output_dir=settings.output_dir or None,
    )


def build_controller(settings: AppSettings, reporter: ProgressReporter) -> JobController:
    return JobController(options=build_options(settings), reporter=reporter)


def conversion_kind(pdf_to_docx: bool, resize_image: bool) -> ConversionKind:
    """Checkbox state -> ConversionKind (PDF to DOCX wins when both are ticked)."""
    return ConversionKind.from_flags(pdf_to_docx, resize_image)
