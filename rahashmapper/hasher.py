"""
Hashing tool adapter - runs RAHasher (or a compatible tool) once per ROM.

    <tool> <console id> <absolute path>

The tool prints the hash on stdout. Only the shape of that output is checked:
exactly HASH_LENGTH characters after stripping whitespace. Exit codes are
ignored.
"""

import logging
import os
import stat
import subprocess
import tempfile
import zipfile
from typing import Optional

import requests

from .exceptions import HashToolError
from .monitor import log_event
from .shared_config import HASH_LENGTH, remove_partial


def is_valid_hash(value: Optional[str]) -> bool:
    return value is not None and len(value) == HASH_LENGTH


class HashTool:
    """Invokes the external hashing executable."""

    def __init__(self, tool_path: str, timeout: Optional[float] = 300):
        self.tool_path = tool_path
        self.timeout = timeout

    def hash(self, platform_id: int, file_path: str) -> Optional[str]:
        """
        Hash one file.

        Returns:
            The 32-character hash, or None if the tool failed to produce one.
            Failures are logged and never raised.
        """
        cmd = [self.tool_path, str(platform_id), os.path.abspath(file_path)]
        try:
            proc = subprocess.run(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            log_event('hash.timeout', f'Hashing timed out after {self.timeout}s: {file_path}',
                      logging.ERROR)
            return None
        except OSError as e:
            log_event('hash.launch.error', f'Could not run {self.tool_path} for {file_path}: {e}',
                      logging.ERROR)
            return None

        # Undecodable bytes become U+FFFD and fail the length check
        output = (proc.stdout or b'').decode('utf-8', errors='replace').strip()
        if not is_valid_hash(output):
            log_event(
                'hash.invalid',
                f'Unexpected hash output for {file_path}: {output!r} '
                f'(length {len(output)}, expected {HASH_LENGTH})',
                logging.ERROR,
            )
            return None
        return output


def ensure_hash_tool(tool_path: str, download_url: Optional[str] = None,
                     session: Optional[requests.Session] = None,
                     timeout: float = 60) -> str:
    """
    Make sure the hashing tool exists, downloading it once if needed.

    The download is a zip archive; the member whose file name matches
    basename(tool_path) is extracted to tool_path and marked executable.

    Raises:
        HashToolError: the tool is missing and cannot be fetched
    """
    if os.path.isfile(tool_path):
        return tool_path
    if not download_url:
        raise HashToolError(f"Hashing tool not found: {tool_path}")

    log_event('hashtool.download.start', f'Downloading {download_url}')
    session = session or requests.Session()
    target_dir = os.path.dirname(tool_path) or '.'
    wanted = os.path.basename(tool_path).lower()
    part_path = tool_path + '.part'

    try:
        os.makedirs(target_dir, exist_ok=True)
        resp = session.get(download_url, stream=True, timeout=timeout)
        resp.raise_for_status()
        with tempfile.TemporaryFile() as tmp:
            for chunk in resp.iter_content(chunk_size=256 * 1024):
                if chunk:
                    tmp.write(chunk)
            tmp.seek(0)
            with zipfile.ZipFile(tmp) as zf:
                member = next(
                    (info for info in zf.infolist()
                     if not info.is_dir() and os.path.basename(info.filename).lower() == wanted),
                    None,
                )
                if member is None:
                    raise HashToolError(
                        f"Archive from {download_url} does not contain {os.path.basename(tool_path)}"
                    )
                with zf.open(member) as src, open(part_path, 'wb') as dst:
                    while True:
                        data = src.read(65536)
                        if not data:
                            break
                        dst.write(data)
                os.replace(part_path, tool_path)
    except requests.RequestException as e:
        log_event('hashtool.download.error', f'Download failed: {e}', logging.ERROR)
        raise HashToolError(f"Could not download hashing tool from {download_url}: {e}") from e
    except (zipfile.BadZipFile, OSError) as e:
        remove_partial(part_path)
        log_event('hashtool.extract.error', f'Extraction failed: {e}', logging.ERROR)
        raise HashToolError(f"Could not extract hashing tool to {tool_path}: {e}") from e

    mode = os.stat(tool_path).st_mode
    os.chmod(tool_path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    log_event('hashtool.download.done', f'Hashing tool installed at {tool_path}')
    return tool_path
