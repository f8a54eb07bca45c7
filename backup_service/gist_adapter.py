"""GitHub gist adapter used as the remote backup blob store."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx

LOGGER = logging.getLogger(__name__)

BACKUP_SUFFIX = "-backup.json"


class BackupError(Exception):
    """Base class for remote backup failures."""


class MissingCredentialsError(BackupError):
    """Raised when the token (or blob id, for reads) is not configured."""


class BackupNotFoundError(BackupError):
    """Raised when the blob holds no file matching the backup suffix."""


class UpstreamError(BackupError):
    """Raised when the gist API answers with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GistBackupAdapter:
    """Create, update and read one private gist holding the backup document."""

    def __init__(
        self,
        *,
        token: str,
        blob_id: Optional[str] = None,
        base_url: str = "https://api.github.com",
        user_agent: str = "scheduler-backup",
        timeout_seconds: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.token = token
        self.blob_id = blob_id or None
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self._timeout = timeout_seconds
        self._transport = transport

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    def push(self, *, site: str, data: Dict[str, Any], when: str) -> Optional[str]:
        """Upsert the backup document.

        Returns the new blob id when the gist had to be created, otherwise
        ``None``. Updates are last-write-wins.
        """

        if not self.token:
            raise MissingCredentialsError("Missing GITHUB_TOKEN")

        files = {
            backup_filename(site): {
                "content": json.dumps({"site": site, "when": when, "data": data}, indent=2),
            }
        }

        LOGGER.info("gist push: site=%s create=%s", site, not self.blob_id)

        with self._http_client() as client:
            if not self.blob_id:
                response = client.post(
                    "/gists",
                    json={
                        "description": f"Auto backups for {site}",
                        "public": False,
                        "files": files,
                    },
                )
                created = self._checked_json(response)
                self.blob_id = str(created["id"])
                LOGGER.info("gist created: id=%s", self.blob_id)
                return self.blob_id

            response = client.patch(f"/gists/{self.blob_id}", json={"files": files})
            self._checked_json(response)
        return None

    def pull(self, *, site: Optional[str] = None) -> str:
        """Return the raw text of the stored backup document."""

        if not self.token or not self.blob_id:
            raise MissingCredentialsError("Missing GITHUB_TOKEN or GIST_ID")

        LOGGER.info("gist pull: id=%s", self.blob_id)

        with self._http_client() as client:
            gist = self._checked_json(client.get(f"/gists/{self.blob_id}"))
            entry = self._find_backup_file(gist.get("files") or {}, site)
            if entry is None:
                raise BackupNotFoundError("No backup file")

            raw_url = entry.get("raw_url")
            if not raw_url:
                return entry.get("content") or ""
            raw = client.get(raw_url)
            if raw.is_error:
                raise UpstreamError(raw.text, raw.status_code)
            return raw.text

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _http_client(self) -> httpx.Client:
        headers = {
            "Authorization": f"token {self.token}",
            "Accept": "application/vnd.github+json",
            "User-Agent": self.user_agent,
        }
        return httpx.Client(
            base_url=self.base_url,
            headers=headers,
            timeout=self._timeout,
            transport=self._transport,
        )

    @staticmethod
    def _checked_json(response: httpx.Response) -> Dict[str, Any]:
        try:
            payload = response.json()
        except ValueError:
            payload = {"message": response.text}

        if response.is_error:
            LOGGER.error(
                "gist API failed: status=%s body=%s",
                response.status_code,
                response.text,
            )
            raise UpstreamError(json.dumps(payload), response.status_code)
        return payload

    @staticmethod
    def _find_backup_file(
        files: Dict[str, Dict[str, Any]],
        site: Optional[str],
    ) -> Optional[Dict[str, Any]]:
        if site and backup_filename(site) in files:
            return files[backup_filename(site)]
        for name, entry in files.items():
            if (entry.get("filename") or name).endswith(BACKUP_SUFFIX):
                return entry
        return None


def backup_filename(site: str) -> str:
    return f"{site}{BACKUP_SUFFIX}"
