"""CLI entry point for glint. Uses Click for argument parsing."""

from __future__ import annotations

import logging
import shutil
import sys

import click

from glint import string, theme
from glint.config import Config, load_config
from glint.conventional import parse_conventional
from glint.git.log import CommitRecord
from glint.git.repo import Git, GitError
from glint.prompt import (
    Cancelled,
    Candidate,
    Confirmed,
    FilesPrompt,
    MessagePrompt,
    Submitted,
    Terminated,
)
from glint.terminal import ProcessTerminal

logger = logging.getLogger("glint")

# Conventional exit status for ctrl-c
EXIT_TERMINATED = 130


def _configure_logging(log_file: str | None, verbose: bool) -> None:
    """Log to *log_file* only; the prompts own the terminal."""
    if log_file:
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    else:
        handler = logging.NullHandler()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def _open_repo() -> Git:
    try:
        return Git.from_cwd()
    except GitError as e:
        click.echo(str(e), err=True)
        sys.exit(1)


@click.group(invoke_without_command=True)
@click.option(
    "--log-file",
    envvar="GLINT_LOG_FILE",
    default=None,
    help="Write debug logs to this file",
)
@click.option("-v", "--verbose", is_flag=True, help="Log at debug level")
@click.pass_context
def main(ctx, log_file, verbose):
    """Write conventional commits interactively."""
    _configure_logging(log_file, verbose)
    if ctx.invoked_subcommand is None:
        ctx.invoke(commit)


# ---------------------------------------------------------------------------
# commit
# ---------------------------------------------------------------------------


def _pick_files(git: Git, config: Config) -> list[str] | None:
    items = git.status()
    if not items:
        click.echo("Nothing to commit.")
        return None

    prompt = FilesPrompt(
        ProcessTerminal(),
        [Candidate(item.path, item.label()) for item in items],
        diff_viewer=git.diff,
        config=config,
    )
    result = prompt.run()
    if isinstance(result, Terminated):
        sys.exit(EXIT_TERMINATED)
    if isinstance(result, Cancelled):
        click.echo("Cancelled.")
        return None
    assert isinstance(result, Confirmed)
    if not result.files:
        click.echo("No files selected.")
        return None
    return result.files


def _write_message(config: Config) -> str | None:
    result = MessagePrompt(ProcessTerminal(), config=config).run()
    if isinstance(result, Terminated):
        sys.exit(EXIT_TERMINATED)
    if isinstance(result, Cancelled):
        click.echo("Cancelled.")
        return None
    assert isinstance(result, Submitted)
    return result.message


@main.command()
@click.option("-m", "--message", default=None, help="Use this commit message")
@click.argument("files", nargs=-1)
def commit(message, files):
    """Stage files and commit them."""
    config = load_config()
    git = _open_repo()

    try:
        paths = list(files) or _pick_files(git, config)
        if not paths:
            return

        if message is None:
            message = _write_message(config)
            if message is None:
                return
        if not message.strip():
            click.echo("Aborting commit due to empty commit message.", err=True)
            sys.exit(1)

        logger.info("committing %d file(s)", len(paths))
        git.add(paths)
        click.echo(git.commit(message), nl=False)
    except GitError as e:
        click.echo(str(e), err=True)
        sys.exit(1)


# ---------------------------------------------------------------------------
# log
# ---------------------------------------------------------------------------


def format_log_line(record: CommitRecord, width: int) -> str:
    """One colored ``hash type(scope): message`` line for *record*."""
    conv = parse_conventional(record.message)
    ty = conv.ty if conv else "unknown"
    body = conv.message if conv else record.message

    message = " ⏎".join(line for line in body.split("\n") if line.strip())
    message = string.truncate(message, width)

    parts = [theme.yellow(record.commit[:8]), " ", theme.magenta(ty)]
    if conv and conv.scope:
        parts += [theme.grey("("), theme.blue(conv.scope), theme.grey(")")]
    if conv and conv.breaking:
        parts.append(theme.red("!"))
    parts.append(theme.grey(": "))
    parts.append(message)
    return "".join(parts)


@main.command(context_settings={"ignore_unknown_options": True})
@click.option("-n", "--num", type=int, default=None, help="Number of commits to show")
@click.option("--debug", is_flag=True, help="Dump parsed records")
@click.argument("git_args", nargs=-1, type=click.UNPROCESSED)
def log(num, debug, git_args):
    """Show history, one conventional commit per line."""
    git = _open_repo()
    size = shutil.get_terminal_size()
    width = max(size.columns, 60)
    height = num if num is not None else max(size.lines, 15)

    try:
        for record in git.log_parsed([f"-{height}", *git_args]):
            if debug:
                click.echo(
                    f"----------\nItem: {record!r}\n"
                    f"as_conventional: {parse_conventional(record.message)!r}"
                )
            else:
                click.echo(format_log_line(record, width))
    except GitError as e:
        click.echo(str(e), err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
