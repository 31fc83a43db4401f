# backend/errors.py

import json
from typing import Dict, Optional

import requests


class BackendError(Exception):
    """A failed call to the community backend, with a user-facing message"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def extract_error_message(
    response: requests.Response,
    default: str,
    status_messages: Optional[Dict[int, str]] = None,
) -> str:
    """
    Best-effort message for a failed response, first match wins:
    the body's error/message field, a message registered for the status
    code, the HTTP reason phrase, then the default.
    """
    try:
        data = response.json()
    except (json.JSONDecodeError, ValueError):
        data = None

    if isinstance(data, dict):
        for key in ("error", "message"):
            value = data.get(key)
            if isinstance(value, str) and value.strip():
                return value

    if status_messages and response.status_code in status_messages:
        return status_messages[response.status_code]

    reason = getattr(response, "reason", None)
    if isinstance(reason, str) and reason.strip():
        return reason
    return default


def check_response(
    response: requests.Response,
    default: str,
    status_messages: Optional[Dict[int, str]] = None,
):
    """Raise BackendError for any non-2xx response"""
    if 200 <= response.status_code < 300:
        return
    raise BackendError(
        extract_error_message(response, default, status_messages),
        status_code=response.status_code,
    )


def wrap_request_exception(e: requests.exceptions.RequestException, default: str) -> BackendError:
    if isinstance(e, requests.exceptions.Timeout):
        return BackendError(f"{default}: request timed out")
    if isinstance(e, requests.exceptions.ConnectionError):
        return BackendError(f"{default}: could not reach the backend")
    return BackendError(f"{default}: {str(e)}")


def read_json(response: requests.Response, default: str):
    try:
        return response.json()
    except ValueError as e:
        raise BackendError(f"{default}: invalid JSON response") from e
