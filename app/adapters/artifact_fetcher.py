"""Raw file host adapter for downloading application manifests and auxiliary files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Final
from urllib.parse import quote

import httpx

from app.domain import FetchResult

from .interfaces import ArtifactFetcherPort

logger = logging.getLogger(__name__)


class RawFileArtifactFetcher(ArtifactFetcherPort):
    """Adapter downloading `<base>/<owner>/<application>/<branch>/<file>` with token auth."""

    _USER_AGENT: Final[str] = "compose-deploy-webhook/1.0 (Python/httpx)"
    _SUCCESS_STATUS_CODE: Final[int] = 200

    def __init__(
        self,
        working_directory: str = ".",
        base_url: str = "https://raw.githubusercontent.com",
        owner: str = "nielshoek",
        branch: str = "main",
        request_timeout_seconds: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize artifact fetcher.

        Args:
            working_directory: Directory receiving downloaded files.
            base_url: Raw file host base URL.
            owner: Repository owner path segment.
            branch: Branch path segment.
            request_timeout_seconds: HTTP request timeout in seconds.
            transport: Optional httpx transport override.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when required config values are invalid.
        """

        normalized_base_url = base_url.strip().rstrip("/")
        normalized_owner = owner.strip()
        normalized_branch = branch.strip()

        if not normalized_base_url:
            raise ValueError("base_url must not be blank")
        if not normalized_owner:
            raise ValueError("owner must not be blank")
        if not normalized_branch:
            raise ValueError("branch must not be blank")
        if request_timeout_seconds <= 0:
            raise ValueError("request_timeout_seconds must be > 0")

        self._working_directory = Path(working_directory).resolve()
        self._base_url = normalized_base_url
        self._owner = normalized_owner
        self._branch = normalized_branch
        self._request_timeout_seconds = request_timeout_seconds
        self._transport = transport

    def adapter_build_source_url(self, application_name: str, file_name: str) -> str:
        """Build the raw file URL for one application file.

        Args:
            application_name: Application repository name.
            file_name: File path inside the repository branch.

        Returns:
            str: Fully qualified download URL.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        return (
            f"{self._base_url}/{quote(self._owner, safe='')}/{quote(application_name, safe='')}"
            f"/{quote(self._branch)}/{quote(file_name)}"
        )

    def adapter_local_path(self, file_name: str) -> Path | None:
        """Resolve the local target path for a file name.

        Args:
            file_name: Requested file name, relative to the working directory.

        Returns:
            Path | None: Target inside the working directory, or None when the name escapes it.

        Raises:
            RuntimeError: This helper does not raise runtime errors.
        """

        target_path = (self._working_directory / file_name).resolve()
        if target_path == self._working_directory or self._working_directory not in target_path.parents:
            return None
        return target_path

    def adapter_fetch_artifact(self, application_name: str, file_name: str, access_token: str) -> FetchResult:
        """Download one file and overwrite its local copy on HTTP 200.

        Args:
            application_name: Application repository name.
            file_name: File name inside the repository branch.
            access_token: Token sent as `Authorization: token <value>`.

        Returns:
            FetchResult: Status code or transport/write error of the download.

        Raises:
            RuntimeError: This implementation reports failures through `FetchResult`.
        """

        target_path = self.adapter_local_path(file_name)
        if target_path is None:
            logger.error("Refusing to download %s: path resolves outside %s", file_name, self._working_directory)
            return FetchResult(
                file_name=file_name,
                local_path=str(self._working_directory / file_name),
                error="file name resolves outside the working directory",
            )

        source_url = self.adapter_build_source_url(application_name=application_name, file_name=file_name)
        headers = {"Authorization": f"token {access_token}", "User-Agent": self._USER_AGENT}
        try:
            with httpx.Client(
                timeout=self._request_timeout_seconds,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                response = client.get(source_url, headers=headers)
        except httpx.TimeoutException as error:
            logger.error("Failed to download %s: request timed out", file_name)
            return FetchResult(file_name=file_name, local_path=str(target_path), error=f"request timed out: {error}")
        except httpx.HTTPError as error:
            logger.error("Failed to download %s: %s", file_name, error)
            return FetchResult(file_name=file_name, local_path=str(target_path), error=f"transport error: {error}")

        if response.status_code != self._SUCCESS_STATUS_CODE:
            logger.error("Failed to download %s: HTTP status code %s", file_name, response.status_code)
            return FetchResult(file_name=file_name, local_path=str(target_path), status_code=response.status_code)

        try:
            target_path.write_bytes(response.content)
        except OSError as error:
            logger.error("Failed to write %s: %s", target_path, error)
            return FetchResult(
                file_name=file_name,
                local_path=str(target_path),
                status_code=response.status_code,
                error=f"local write failed: {error}",
            )

        logger.info("Downloaded %s successfully.", file_name)
        return FetchResult(file_name=file_name, local_path=str(target_path), status_code=response.status_code)
