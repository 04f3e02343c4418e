from __future__ import annotations


class ExtractionError(Exception):
    ...


class InputDecodeError(ExtractionError):
    ...


class ExportError(ExtractionError):
    ...


class ValidationError(ExtractionError):
    ...
