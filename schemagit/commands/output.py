"""Writing command output to a file or to standard output."""

from __future__ import annotations

import sys

from termcolor import colored

from .utils import CommandError, prepare_output_path


def write_or_stdout(
    content: str,
    output_path: str | None,
    yes: bool,
    no_create_dir: bool,
    content_name: str,
) -> None:
    """Write content to output_path, or print it when no path is given."""
    if output_path is None:
        sys.stdout.write(content)
        return

    prepare_output_path(output_path, yes, no_create_dir)
    try:
        with open(output_path, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
    except OSError as error:
        raise CommandError(f"Failed to write {content_name} file: {error}") from error

    print(colored(f"✓ {content_name} saved: {output_path}", "green"))