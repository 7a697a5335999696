"""
Executable Extractor - coordinate -> runnable executable on disk

Materializes a generator or compiler distribution:
1. Locate the archive (local repository, download cache, or remote repository)
2. Unpack it into a temporary sibling directory
3. Atomically move the result into place

Extraction is idempotent: a directory stamped with the same coordinate is
reused as-is. Concurrent requests for one coordinate serialize on a
per-coordinate lock, so only one writer ever populates an output directory.
"""
import logging
import os
import shutil
import stat
import tarfile
import tempfile
import threading
import zipfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

import requests

from conjure_orchestrator.config import (
    DOWNLOAD_TIMEOUT,
    EXECUTABLE_CACHE_DIR,
    LOCAL_REPOSITORY_DIR,
    REPOSITORY_URL,
)
from conjure_orchestrator.errors import ExtractionError
from conjure_orchestrator.schemas.project_schema import GeneratorDependency

logger = logging.getLogger(__name__)

STAMP_FILENAME = ".coordinate"


class ExecutableExtractor(ABC):
    """Materializes a runnable executable by coordinate"""

    @abstractmethod
    def materialize(self, coordinate: str, output_dir: Path, executable_name: str) -> Path:
        """Return the path of `executable_name` extracted from `coordinate` into `output_dir`"""


class ArtifactResolver:
    """
    Finds distribution archives in maven layout

    Looks in the local repository first, then the download cache, and
    finally fetches from the remote repository into the download cache.
    """

    def __init__(
        self,
        repository_url: str = REPOSITORY_URL,
        local_repository: Optional[Path] = None,
        cache_dir: Optional[Path] = None,
        timeout: int = DOWNLOAD_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.repository_url = repository_url.rstrip("/")
        if local_repository is None and LOCAL_REPOSITORY_DIR:
            local_repository = Path(LOCAL_REPOSITORY_DIR)
        self.local_repository = Path(local_repository) if local_repository else None
        self.cache_dir = Path(cache_dir) if cache_dir else EXECUTABLE_CACHE_DIR / "downloads"
        self.timeout = timeout
        self.session = session or requests.Session()

    @staticmethod
    def relative_path(dependency: GeneratorDependency) -> str:
        if not dependency.group or not dependency.version:
            raise ExtractionError(
                f"Cannot locate '{dependency.coordinate}': group and version are required"
            )
        extension = dependency.extension or "tgz"
        return "/".join([
            *dependency.group.split("."),
            dependency.name,
            dependency.version,
            f"{dependency.name}-{dependency.version}.{extension}",
        ])

    def resolve(self, dependency: GeneratorDependency) -> Path:
        relative = self.relative_path(dependency)

        if self.local_repository is not None:
            local = self.local_repository / relative
            if local.exists():
                return local

        cached = self.cache_dir / relative
        if cached.exists():
            return cached

        url = f"{self.repository_url}/{relative}"
        logger.info(f"[Extractor] Downloading {url}")
        try:
            response = self.session.get(url, timeout=self.timeout, stream=True)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise ExtractionError(f"Failed to download {dependency.coordinate} from {url}: {e}") from e

        cached.parent.mkdir(parents=True, exist_ok=True)
        fd, partial = tempfile.mkstemp(dir=cached.parent, suffix=".part")
        try:
            with os.fdopen(fd, "wb") as handle:
                for chunk in response.iter_content(chunk_size=1 << 16):
                    handle.write(chunk)
            os.replace(partial, cached)
        finally:
            if os.path.exists(partial):
                os.remove(partial)
        return cached


class ArchiveExtractor(ExecutableExtractor):
    """Unpacks .tgz/.tar.gz/.zip distributions with a single top-level directory"""

    _locks: Dict[str, threading.Lock] = {}
    _locks_guard = threading.Lock()

    def __init__(self, resolver: Optional[ArtifactResolver] = None):
        self.resolver = resolver or ArtifactResolver()

    @classmethod
    def _lock_for(cls, key: str) -> threading.Lock:
        with cls._locks_guard:
            return cls._locks.setdefault(key, threading.Lock())

    def materialize(self, coordinate: str, output_dir: Path, executable_name: str) -> Path:
        output_dir = Path(output_dir)
        dependency = GeneratorDependency.parse(coordinate)

        with self._lock_for(coordinate):
            if self._is_current(output_dir, coordinate):
                logger.info(f"[Extractor] {coordinate} already extracted to {output_dir}")
            else:
                archive = self.resolver.resolve(dependency)
                self._extract(archive, output_dir, coordinate)
                logger.info(f"[Extractor] Extracted {coordinate} to {output_dir}")

        executable = self.executable_path(output_dir, executable_name)
        if not executable.exists():
            raise ExtractionError(f"Executable '{executable_name}' not found in {coordinate} ({executable})")
        return executable

    @staticmethod
    def executable_path(output_dir: Path, executable_name: str) -> Path:
        name = executable_name + ".bat" if os.name == "nt" else executable_name
        return Path(output_dir) / "bin" / name

    @staticmethod
    def _is_current(output_dir: Path, coordinate: str) -> bool:
        stamp = output_dir / STAMP_FILENAME
        return stamp.exists() and stamp.read_text().strip() == coordinate

    def _extract(self, archive: Path, output_dir: Path, coordinate: str):
        output_dir.parent.mkdir(parents=True, exist_ok=True)
        staging = Path(tempfile.mkdtemp(dir=output_dir.parent, prefix=f".{output_dir.name}-"))
        try:
            name = archive.name
            if name.endswith(".zip"):
                with zipfile.ZipFile(archive) as zf:
                    zf.extractall(staging)
            elif name.endswith((".tgz", ".tar.gz", ".tar")):
                with tarfile.open(archive) as tf:
                    tf.extractall(staging, filter="data")
            else:
                raise ExtractionError(f"Unsupported archive type: {archive}")

            # Distributions nest everything under '<name>-<version>/'
            entries = list(staging.iterdir())
            content = entries[0] if len(entries) == 1 and entries[0].is_dir() else staging

            bin_dir = content / "bin"
            if bin_dir.is_dir():
                for script in bin_dir.iterdir():
                    mode = script.stat().st_mode
                    script.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

            (content / STAMP_FILENAME).write_text(coordinate + "\n")

            if output_dir.exists():
                shutil.rmtree(output_dir)
            os.replace(content, output_dir)
        except (OSError, tarfile.TarError, zipfile.BadZipFile) as e:
            raise ExtractionError(f"Failed to extract {archive}: {e}") from e
        finally:
            if staging.exists():
                shutil.rmtree(staging, ignore_errors=True)


__all__ = [
    "ExecutableExtractor",
    "ArtifactResolver",
    "ArchiveExtractor",
]
