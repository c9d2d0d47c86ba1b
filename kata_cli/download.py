"""Download workflow for one kata.

Steps, in order:
1. Fetch assets (description, sample solution, sample tests) for the language
2. Derive the destination folder from the kata name
3. Create the destination directory (idempotent)
4. Optional per-language preinstall step; its result is a path prefix for sources
5. Write solution, tests and instructions files
6. Optionally open the destination in an editor

Failures in steps 1, 3 and 5 abort the download and propagate as KataError.
Steps 4 and 6 are conveniences: their failures are logged and the download
carries on (step 4 with an empty prefix).
"""
from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from kata_api.assets import fetch_challenge_assets
from kata_api.core.config import get_download_config, run_preinstall
from kata_api.core.naming import get_extension, slugify, to_snake_case
from kata_api.model import (
    ChallengeAssets,
    FilesystemError,
    PostinstallError,
    PreinstallError,
)

logger = logging.getLogger(__name__)

FetchAssets = Callable[[str, str], ChallengeAssets]
WriteFile = Callable[[str, str], None]
MakeDirs = Callable[[str], None]
RunCommand = Callable[[List[str], str], None]


def write_file(path: str, content: str) -> None:
    """Write text to path, creating parent directories.

    Raises:
        FilesystemError: If the file cannot be written
    """
    try:
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
    except OSError as e:
        raise FilesystemError(path, f"Could not write {path}: {e}") from e


def make_directory(path: str) -> None:
    """Create a directory tree; succeeds if it already exists.

    Raises:
        FilesystemError: If the directory cannot be created
    """
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        raise FilesystemError(path, f"Could not create {path}: {e}") from e


def run_command(args: List[str], cwd: str) -> None:
    """Run a scaffolding command to completion.

    Raises:
        PreinstallError: If the command cannot start or exits non-zero
    """
    try:
        subprocess.run(args, cwd=cwd, check=True, capture_output=True, text=True)
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or "").strip() or f"exit status {e.returncode}"
        raise PreinstallError(f"{args[0]} failed: {detail}") from e
    except OSError as e:
        raise PreinstallError(f"Could not run {args[0]}: {e}") from e


def open_in_editor(editor_command: str, path: str) -> None:
    """Launch the editor on path without waiting for it.

    Raises:
        PostinstallError: If the command is malformed or cannot start
    """
    try:
        args = shlex.split(editor_command)
    except ValueError as e:
        raise PostinstallError(f"Malformed editor command {editor_command!r}: {e}") from e
    if not args:
        raise PostinstallError("Empty editor command")
    try:
        subprocess.Popen(
            args + [path],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except OSError as e:
        raise PostinstallError(f"Could not start {args[0]}: {e}") from e


def _cargo_init(destination: str, slug: str, run: RunCommand) -> str:
    if not os.path.exists(os.path.join(destination, "Cargo.toml")):
        name = to_snake_case(slug) or "kata"
        run(["cargo", "init", "--vcs", "none", "--name", name], destination)
    return "src/"


# language -> step(destination, slug, run_command) returning a source path prefix
PREINSTALL_STEPS: Dict[str, Callable[[str, str, RunCommand], str]] = {
    "rust": _cargo_init,
}


def render_instructions(name: str, url: str, description: str) -> str:
    """Build the instructions markdown file."""
    parts = [f"# {name}".rstrip()]
    if url:
        parts.append(url)
    if description:
        parts.append(description.strip())
    return "\n\n".join(parts) + "\n"


@dataclass
class DownloadResult:
    """Outcome of a completed download."""

    directory: str
    files: List[str] = field(default_factory=list)
    prefix: str = ""
    editor_opened: bool = False


class DownloadPipeline:
    """Fetch a kata's assets and lay them out on disk.

    Collaborators are injectable so the workflow can be exercised without
    network, filesystem or subprocess access.
    """

    def __init__(
        self,
        fetch_assets: FetchAssets = fetch_challenge_assets,
        write: WriteFile = write_file,
        make_dirs: MakeDirs = make_directory,
        run: RunCommand = run_command,
        open_editor: Callable[[str, str], None] = open_in_editor,
        instructions_filename: Optional[str] = None,
        preinstall: Optional[bool] = None,
    ):
        dl = get_download_config()
        self.fetch_assets = fetch_assets
        self.write = write
        self.make_dirs = make_dirs
        self.run_command = run
        self.open_editor = open_editor
        self.instructions_filename = instructions_filename or dl["instructions_filename"]
        self.preinstall_enabled = run_preinstall() if preinstall is None else preinstall

    def _preinstall(self, language: str, destination: str, slug: str) -> str:
        step = PREINSTALL_STEPS.get(language.lower()) if self.preinstall_enabled else None
        if step is None:
            return ""
        try:
            prefix = step(destination, slug, self.run_command)
        except PreinstallError as e:
            logger.warning("Preinstall for %s failed, writing files without prefix: %s", language, e.message)
            return ""
        logger.info("Preinstall for %s done (prefix %r)", language, prefix)
        return prefix

    def _postinstall(self, editor_command: str, destination: str) -> bool:
        try:
            self.open_editor(editor_command, destination)
        except PostinstallError as e:
            logger.warning("Could not open editor: %s", e.message)
            return False
        return True

    def run(
        self,
        kata_id: str,
        name: str,
        language: str,
        destination_root: str,
        editor_command: Optional[str] = None,
        url: str = "",
    ) -> DownloadResult:
        """Download one kata.

        Args:
            kata_id: Kata identifier
            name: Display name (used for the folder name)
            language: Catalog language identifier
            destination_root: Folder receiving the kata folder
            editor_command: Optional command opened on the kata folder afterwards
            url: Canonical kata URL for the instructions file

        Returns:
            DownloadResult describing what was written

        Raises:
            NetworkError, AssetExtractionError: If assets cannot be fetched
            FilesystemError: If the folder or a file cannot be written
        """
        assets = self.fetch_assets(kata_id, language)

        slug = slugify(name)
        if not slug.strip("-"):
            slug = kata_id
        destination = os.path.join(os.path.expanduser(destination_root), slug)
        self.make_dirs(destination)

        prefix = self._preinstall(language, destination, slug)

        ext = get_extension(language)
        files = [
            (os.path.join(destination, f"{prefix}solution{ext}"), "\n".join(assets.solution_lines)),
            (os.path.join(destination, f"{prefix}tests{ext}"), "\n".join(assets.test_lines)),
            (
                os.path.join(destination, self.instructions_filename),
                render_instructions(name, url, assets.description),
            ),
        ]
        for path, content in files:
            self.write(path, content)
        logger.info("Downloaded kata %s (%s) to %s", kata_id, language, destination)

        result = DownloadResult(directory=destination, files=[p for p, _ in files], prefix=prefix)
        if editor_command and editor_command.strip():
            result.editor_opened = self._postinstall(editor_command, destination)
        return result


__all__ = [
    "DownloadPipeline",
    "DownloadResult",
    "PREINSTALL_STEPS",
    "make_directory",
    "open_in_editor",
    "render_instructions",
    "run_command",
    "write_file",
]
