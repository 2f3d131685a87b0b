"""Utility functions for pierctl"""

from .async_utils import run_async
from .file_utils import (
    exists,
    ensure_dir,
    make_executable,
    extract_archive,
    copy_file,
    remove_tree,
    prepend_env_path,
)
from .template_utils import render_template, render_template_file, load_template
from .process_utils import CommandRunner, is_process_alive, terminate_process

__all__ = [
    # Async helpers
    "run_async",

    # File helpers
    "exists",
    "ensure_dir",
    "make_executable",
    "extract_archive",
    "copy_file",
    "remove_tree",
    "prepend_env_path",

    # Templates
    "render_template",
    "render_template_file",
    "load_template",

    # Processes
    "CommandRunner",
    "is_process_alive",
    "terminate_process",
]
