# pierctl/utils/file_utils.py
"""File operation utilities"""

import os
import shutil
import stat
import tarfile
from pathlib import Path, PurePosixPath
from typing import List


def exists(path: Path) -> bool:
    """Check a path exists, counting dangling symlinks as present"""
    return path.exists() or path.is_symlink()


def ensure_dir(path: Path) -> Path:
    """Create a directory tree if absent"""
    path.mkdir(parents=True, exist_ok=True)
    return path


def make_executable(path: Path) -> None:
    """Add execute bits for everyone who can read the file"""
    mode = path.stat().st_mode
    path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def extract_archive(archive: Path, dest_dir: Path, strip_components: int = 0) -> List[Path]:
    """
    Extract a tar archive, optionally dropping leading path components

    Behaves like ``tar xf archive -C dest --strip-components N``. Members that
    would land outside ``dest_dir`` are rejected.

    Args:
        archive: Archive path (any compression tarfile understands)
        dest_dir: Extraction directory
        strip_components: Number of leading path components to drop

    Returns:
        Extracted file paths

    Raises:
        tarfile.TarError: On corrupt archives or unsafe members
    """
    dest_dir = dest_dir.resolve()
    extracted = []

    with tarfile.open(archive, 'r:*') as tar:
        for member in tar.getmembers():
            parts = PurePosixPath(member.name).parts
            if parts and parts[0] == "/":
                raise tarfile.TarError(f"Absolute path in archive: {member.name}")
            if ".." in parts:
                raise tarfile.TarError(f"Parent reference in archive: {member.name}")

            parts = parts[strip_components:]
            if not parts:
                continue

            member.name = str(PurePosixPath(*parts))
            target = dest_dir.joinpath(*parts)

            if member.issym() or member.islnk():
                link_parts = PurePosixPath(member.linkname).parts
                if member.islnk():
                    link_parts = link_parts[strip_components:]
                    member.linkname = str(PurePosixPath(*link_parts)) if link_parts else ""
                if not member.linkname or member.linkname.startswith("/"):
                    raise tarfile.TarError(f"Unsafe link in archive: {member.name}")

            if hasattr(tarfile, "data_filter"):
                tar.extract(member, dest_dir, filter="data")
            else:
                tar.extract(member, dest_dir)
            if member.isfile():
                extracted.append(target)

    return extracted


def copy_file(src: Path, dst: Path) -> Path:
    """Copy a file with metadata, creating parent directories"""
    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(src, dst)
    return dst


def remove_tree(path: Path) -> bool:
    """
    Remove a file or directory tree

    Errors propagate to the caller.

    Args:
        path: Path to remove

    Returns:
        True if something was removed
    """
    if path.is_symlink() or path.is_file():
        path.unlink()
        return True
    if path.is_dir():
        shutil.rmtree(path)
        return True
    return False


def prepend_env_path(env: dict, key: str, value: str) -> dict:
    """Prepend a directory to a ``PATH``-style environment variable"""
    current = env.get(key)
    env[key] = value if not current else f"{value}{os.pathsep}{current}"
    return env
