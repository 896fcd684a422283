"""Package archive download.

Fetches a package archive into a run-unique temporary directory. The
install transaction that requested the download owns the directory and
removes it once placement finishes.
"""

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import urlparse

import requests

from gpmctl.core.protocols import ProgressFn, Transfer
from gpmctl.models.package import Package
from gpmctl.utils.fileops import make_dir, remove_path

logger = logging.getLogger(__name__)

CHUNK_BYTES = 8192
REQUEST_TIMEOUT = 60.0


class TransportError(Exception):
    """Raised when a remote resource cannot be fetched."""


class HttpTransfer:
    """HTTP(S) transfer backed by a requests session.

    Responses are streamed so progress can be reported while the body
    arrives.
    """

    def __init__(self, session: requests.Session | None = None, timeout: float = REQUEST_TIMEOUT) -> None:
        self._session = session or requests.Session()
        self._timeout = timeout

    def get(self, url: str, on_progress: ProgressFn | None = None) -> bytes:
        """Download a URL and return its body.

        Progress is reported as a non-decreasing percentage computed from
        the Content-Length header, ending with 100.

        Raises:
            TransportError: On connection errors or non-2xx responses.
        """
        try:
            response = self._session.get(url, stream=True, allow_redirects=True, timeout=self._timeout)
            response.raise_for_status()

            total = int(response.headers.get("Content-Length") or 0)
            received = 0
            last_percent = -1
            chunks: list[bytes] = []

            for chunk in response.iter_content(chunk_size=CHUNK_BYTES):
                if not chunk:
                    continue
                chunks.append(chunk)
                received += len(chunk)
                if on_progress is not None and total > 0:
                    percent = min(100, received * 100 // total)
                    if percent > last_percent:
                        last_percent = percent
                        on_progress(percent)
        except requests.RequestException as e:
            raise TransportError(f"Failed to download {url}: {e}") from e
        except ValueError as e:
            raise TransportError(f"Invalid response from {url}: {e}") from e

        if on_progress is not None and last_percent < 100:
            on_progress(100)

        logger.debug("Downloaded %s (%d bytes)", url, received)
        return b"".join(chunks)


@dataclass(frozen=True, slots=True)
class DownloadedArchive:
    """A fetched archive and the temporary directory that holds it.

    Attributes:
        path: Archive file.
        tmp_dir: Temporary directory to remove after placement.
    """

    path: Path
    tmp_dir: Path


def _archive_filename(package: Package, url: str) -> str:
    basename = Path(urlparse(url).path).name or "package"
    return f"{package.slug}-{basename}"


def fetch_package(
    package: Package,
    transfer: Transfer,
    download_dir: Path,
    on_progress: ProgressFn | None = None,
) -> DownloadedArchive:
    """Download a package archive to a new temporary directory.

    The temporary directory is only created once the body has arrived, so
    a failed transfer leaves nothing behind.

    Args:
        package: Package to download.
        transfer: Transfer implementation used to fetch the archive.
        download_dir: Parent directory for the temporary directory.
        on_progress: Optional progress callback.

    Returns:
        DownloadedArchive describing the fetched file.

    Raises:
        TransportError: If the package has no archive URL or the transfer fails.
        OSError: If the archive cannot be written.
    """
    if not package.zipball_url:
        raise TransportError(f"Package '{package.slug}' has no download URL")

    content = transfer.get(package.zipball_url, on_progress)

    make_dir(download_dir)
    tmp_dir = Path(tempfile.mkdtemp(prefix="gpmctl-", dir=download_dir))
    archive = tmp_dir / _archive_filename(package, package.zipball_url)
    try:
        archive.write_bytes(content)
    except OSError:
        remove_path(tmp_dir)
        raise

    logger.debug("Saved %s archive to %s", package.slug, archive)
    return DownloadedArchive(path=archive, tmp_dir=tmp_dir)
