# backend/login.py

import logging
import os
from typing import Optional

import requests
from dotenv import load_dotenv

from backend.errors import (
    BackendError,
    check_response,
    read_json,
    wrap_request_exception,
)
from models.session import Session

logger = logging.getLogger("backend.login")


def login(backend_url: str, email: str, password: str, timeout: float = 30) -> str:
    logger.info(f"Logging in to {backend_url} with email {email}")

    try:
        response = requests.post(
            f"{backend_url.rstrip('/')}/login",
            json={"email": email, "password": password},
            headers={
                "Accept": "application/json",
                "Accept-Language": "en",
            },
            timeout=timeout,
        )
    except requests.exceptions.RequestException as e:
        raise wrap_request_exception(e, "Login failed") from e

    check_response(response, "Login failed")

    data = read_json(response, "Login failed")
    payload = data.get("data", data) if isinstance(data, dict) else {}
    token = payload.get("token") if isinstance(payload, dict) else None
    if not token:
        raise BackendError("Login response did not contain a token")

    logger.info("Login successful")
    return token


def create_session(dotenv_path: Optional[str] = None) -> Session:
    """
    Build the session from the environment (.env supported).

    BACKEND_TOKEN short-circuits the login; otherwise EMAIL and PASSWORD are
    used to obtain one.
    """
    load_dotenv(dotenv_path=dotenv_path, override=False)

    url = os.getenv("BACKEND_URL")
    if not url:
        raise RuntimeError("Missing required environment variable: BACKEND_URL")

    timeout = float(os.getenv("REQUEST_TIMEOUT", "30"))
    token = os.getenv("BACKEND_TOKEN")
    if not token:
        email = os.getenv("EMAIL")
        password = os.getenv("PASSWORD")
        if not email or not password:
            raise RuntimeError("Set BACKEND_TOKEN, or EMAIL and PASSWORD, to log in")
        token = login(url, email, password, timeout=timeout)

    return Session(
        backend_url=url,
        token=token,
        user_id=os.getenv("USER_ID"),
        community_id=os.getenv("COMMUNITY_ID"),
        timeout=timeout,
    )


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    session = create_session()
    print(f"Session ready for {session.backend_url} (user {session.user_id})")
