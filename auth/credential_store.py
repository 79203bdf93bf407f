"""
Credential Store for docmark.

Per-user authorized-user credentials stored as JSON files, one file per email
address, in the directory named by DOCMARK_CREDENTIALS_DIR.
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from datetime import datetime

from google.oauth2.credentials import Credentials

from core.config import get_formatter_config

logger = logging.getLogger(__name__)


class CredentialStore(ABC):
    """Abstract base class for credential storage."""

    @abstractmethod
    def get_credential(self, user_email: str) -> Credentials | None:
        """Get credentials for a user by email."""
        pass

    @abstractmethod
    def store_credential(self, user_email: str, credentials: Credentials) -> bool:
        """Store credentials for a user."""
        pass

    @abstractmethod
    def delete_credential(self, user_email: str) -> bool:
        """Delete credentials for a user."""
        pass

    @abstractmethod
    def list_users(self) -> list[str]:
        """List all users with stored credentials."""
        pass


def _parse_expiry(raw: str | None, user_email: str) -> datetime | None:
    if not raw:
        return None
    try:
        expiry = datetime.fromisoformat(raw)
    except (ValueError, TypeError) as e:
        logger.warning(f"Could not parse expiry time for {user_email}: {e}")
        return None
    # google-auth compares expiry against a naive UTC timestamp.
    return expiry.replace(tzinfo=None) if expiry.tzinfo is not None else expiry


class LocalDirectoryCredentialStore(CredentialStore):
    """Credential store backed by `<base_dir>/<email>.json` files."""

    def __init__(self, base_dir: str | None = None):
        self.base_dir: str = base_dir or get_formatter_config().credentials_dir
        logger.info(f"LocalDirectoryCredentialStore using {self.base_dir}")

    def _credential_path(self, user_email: str) -> str:
        return os.path.join(self.base_dir, f"{user_email}.json")

    def get_credential(self, user_email: str) -> Credentials | None:
        path = self._credential_path(user_email)
        if not os.path.exists(path):
            logger.debug(f"No credential file found for {user_email} at {path}")
            return None

        try:
            with open(path) as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Error loading credentials for {user_email} from {path}: {e}")
            return None

        return Credentials(
            token=data.get("token"),
            refresh_token=data.get("refresh_token"),
            token_uri=data.get("token_uri"),
            client_id=data.get("client_id"),
            client_secret=data.get("client_secret"),
            scopes=data.get("scopes"),
            expiry=_parse_expiry(data.get("expiry"), user_email),
        )

    def store_credential(self, user_email: str, credentials: Credentials) -> bool:
        path = self._credential_path(user_email)
        data = {
            "token": credentials.token,
            "refresh_token": credentials.refresh_token,
            "token_uri": credentials.token_uri,
            "client_id": credentials.client_id,
            "client_secret": credentials.client_secret,
            "scopes": list(credentials.scopes) if credentials.scopes else None,
            "expiry": credentials.expiry.isoformat() if credentials.expiry else None,
        }
        try:
            os.makedirs(self.base_dir, exist_ok=True)
            with open(path, "w") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            logger.error(f"Error storing credentials for {user_email} to {path}: {e}")
            return False
        logger.info(f"Stored credentials for {user_email}")
        return True

    def delete_credential(self, user_email: str) -> bool:
        path = self._credential_path(user_email)
        try:
            os.remove(path)
        except FileNotFoundError:
            logger.debug(f"No credential file to delete for {user_email}")
        except OSError as e:
            logger.error(f"Error deleting credentials for {user_email} from {path}: {e}")
            return False
        return True

    def list_users(self) -> list[str]:
        if not os.path.isdir(self.base_dir):
            return []
        try:
            names = os.listdir(self.base_dir)
        except OSError as e:
            logger.error(f"Error listing credential files in {self.base_dir}: {e}")
            return []
        return sorted(name[: -len(".json")] for name in names if name.endswith(".json"))
