# src/zap_tasks/auth.py

"""
Credential loading for the Google Tasks API.

A service account with domain-wide delegation acts on behalf of one
end-user account (the CLI's --user option). The credentials file is read,
never written.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from google.oauth2 import service_account

from .errors import SetupError

logger = logging.getLogger(__name__)


def load_user_credentials(
    credentials_path: str | Path,
    user_email: str,
    scopes: list[str],
) -> service_account.Credentials:
    """Load service-account credentials and impersonate `user_email`."""
    if not user_email or not user_email.strip():
        raise SetupError("User email is required. Use -u to specify the account to operate on.")

    path = Path(credentials_path).expanduser()
    if not path.exists():
        raise SetupError(f"unable to read credentials file: {path} does not exist")

    try:
        info = json.loads(path.read_text("utf-8"))
    except (OSError, ValueError) as e:
        raise SetupError(f"unable to read credentials file {path}: {e}") from e

    if not isinstance(info, dict) or info.get("type") != "service_account":
        raise SetupError(f"unable to parse credentials: {path} is not a service-account key file")

    try:
        creds = service_account.Credentials.from_service_account_info(info, scopes=list(scopes))
    except (ValueError, KeyError) as e:
        raise SetupError(f"unable to parse credentials: {e}") from e

    logger.info("Loaded service account %s acting as %s", info.get("client_email", "?"), user_email)
    return creds.with_subject(user_email.strip())
