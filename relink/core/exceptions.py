#!/usr/bin/env python3
"""
exceptions.py
--------------------
Custom exception classes for the relink project.

This module defines a hierarchy of exceptions used throughout the project
to handle specific error conditions in configuration loading, job
validation, and communication with the Document Service.

Exception Hierarchy:
    Exception (built-in)
    └── RelinkError - Base for all project errors
        ├── ConfigError - Missing or malformed configuration
        ├── ValidationError - Invalid rename job values
        └── DocumentServiceError - Base for Document Service failures
            ├── TransportError - Network, connection or HTTP status failures
            ├── DecodeError - Malformed response bodies
            ├── EditPermissionError - Insufficient edit rights on a document
            └── SubmissionError - Rejected content submissions

Usage:
    from relink.core.exceptions import EditPermissionError, DocumentServiceError

    try:
        page = service.fetch_edit(document)
    except EditPermissionError:
        logger.log_warning(f"No edit rights for {document}")
    except DocumentServiceError as e:
        logger.log_warning(f"Fetch failed for {document}: {e}")
"""
# --- Annotations ---
from __future__ import annotations


class RelinkError(Exception):
    """
    Base exception for all relink errors.

    Catch this to handle any error raised by the project itself, as
    opposed to programming errors.
    """

    pass


class ConfigError(RelinkError):
    """
    Exception for configuration loading failures.

    Raised when the configuration file cannot be read or is invalid:
    - File missing or unreadable
    - YAML syntax errors
    - Required fields missing (domain, token, namespaces)
    - Fields of the wrong type

    Examples:
        >>> raise ConfigError("Config file not found: relink.yaml")
        >>> raise ConfigError("Missing required field: 'token'")
    """

    pass


class ValidationError(RelinkError):
    """
    Exception for rename job validation failures.

    Raised when a RenameJob is constructed with values that cannot
    produce a meaningful run:
    - Empty old or new title
    - Old and new title are identical
    - No namespaces to search

    Examples:
        >>> raise ValidationError("Old and new title are identical: 'Foo'")
        >>> raise ValidationError("At least one namespace is required")
    """

    pass


class DocumentServiceError(RelinkError):
    """
    Base exception for Document Service failures.

    Every operation of the Document Service raises a subclass of this
    exception, so per-document and per-namespace loops can catch it to
    skip a single item without aborting the whole run.

    Attributes:
        message: Error description
        status_code: HTTP status code when one was received, else 0
    """

    def __init__(self, message: str, status_code: int = 0) -> None:
        super().__init__(message)
        self.status_code = status_code


class TransportError(DocumentServiceError):
    """
    Exception for network-level failures.

    Raised when a request could not complete or returned a non-success
    HTTP status on a read operation:
    - Connection refused or DNS failure
    - Timeouts
    - HTTP 4xx/5xx on GET requests

    Examples:
        >>> raise TransportError("Connection refused: wiki.example.org")
        >>> raise TransportError("HTTP 503 on backlink/Foo", status_code=503)
    """

    pass


class DecodeError(DocumentServiceError):
    """
    Exception for malformed response bodies.

    Raised when a response body is not valid JSON or does not have the
    expected shape (e.g. a dict where a list was expected).

    Examples:
        >>> raise DecodeError("Expected a list of threads, got dict")
    """

    pass


class EditPermissionError(DocumentServiceError):
    """
    Exception for insufficient edit rights.

    Raised by the content fetch when the service reports that the
    authenticated account may not edit the document. Always results in
    the document being skipped, never in an aborted run.
    """

    pass


class SubmissionError(DocumentServiceError):
    """
    Exception for rejected content submissions.

    Raised when posting rewritten content returns a non-success status.

    Examples:
        >>> raise SubmissionError("HTTP 403 Forbidden", status_code=403)
    """

    pass
