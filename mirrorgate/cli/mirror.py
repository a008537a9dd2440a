"""
CLI mirror commands — push, status and discovery queries.

Usage:
    mirrorgate mirror push <slave> <repo>
    mirrorgate mirror status <slave|all> <repo> [--json]
    mirrorgate mirror status all all [--json]      # server side only
    mirrorgate mirror list master|slaves <repo>    # server side only

A caller is remote when GL_USER is set; remote callers may only push to
or query the slaves configured for the repo.
"""

from __future__ import annotations

import json
import sys
from typing import Tuple

import click

from ..mirror.manager import MirrorManager
from ..mirror.report import ALL
from ..models.context import ExecutionContext
from ..validation import MirrorError, UsageError, strip_git_suffix


def _fail(ctx: click.Context, error: MirrorError) -> None:
    """Turn a mirror error into a usage message or a FATAL exit."""
    if isinstance(error, UsageError):
        raise click.UsageError(str(error), ctx=ctx)
    click.secho(f"FATAL: {error}", fg="red", err=True)
    raise SystemExit(1)


def _setup(ctx: click.Context) -> Tuple[MirrorManager, ExecutionContext]:
    obj = ctx.ensure_object(dict)
    if "manager" not in obj:
        try:
            obj["manager"] = MirrorManager.from_env()
        except MirrorError as e:
            _fail(ctx, e)
    if "context" not in obj:
        obj["context"] = ExecutionContext.from_env()
    return obj["manager"], obj["context"]


@click.group("mirror")
def mirror() -> None:
    """Mirror repositories to slave hosts and report failed pushes."""


@mirror.command("push")
@click.argument("slave")
@click.argument("repo")
@click.pass_context
def mirror_push(ctx: click.Context, slave: str, repo: str) -> None:
    """Push REPO to SLAVE with `git push --mirror` and record the outcome."""
    repo = strip_git_suffix(repo)
    manager, context = _setup(ctx)

    # Someone is watching: stream the transfer output as it arrives
    live = context.is_remote or sys.stderr.isatty()
    echo = (lambda line: click.echo(line, err=True)) if live else None

    try:
        outcome = manager.push(context, slave, repo, echo=echo)
    except MirrorError as e:
        _fail(ctx, e)

    if outcome.exit_code:
        raise SystemExit(outcome.exit_code)


@mirror.command("status")
@click.argument("slave")
@click.argument("repo")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def mirror_status(ctx: click.Context, slave: str, repo: str, as_json: bool) -> None:
    """Show saved failures of the last push of REPO to SLAVE (or all).

    `status all all` lists every repo with a failed slave, one per line.
    """
    repo = strip_git_suffix(repo)
    manager, context = _setup(ctx)

    try:
        if repo == ALL:
            if slave != ALL:
                raise UsageError("use 'status all all' to list failed repos")
            repos = manager.failed_repos(context)
            if as_json:
                click.echo(json.dumps(repos, indent=2))
            else:
                for name in repos:
                    click.echo(name)
            return

        if as_json:
            records = manager.status_records(context, slave, repo)
            click.echo(json.dumps([r.model_dump() for r in records], indent=2))
            return

        for block in manager.status(context, slave, repo):
            click.echo(block, nl=False)
    except MirrorError as e:
        _fail(ctx, e)


@mirror.command("list")
@click.argument("what", type=click.Choice(["master", "slaves"]))
@click.argument("repo")
@click.pass_context
def mirror_list(ctx: click.Context, what: str, repo: str) -> None:
    """Print the master or the sorted slaves of REPO."""
    repo = strip_git_suffix(repo)
    manager, context = _setup(ctx)

    try:
        if what == "master":
            click.echo(manager.list_master(context, repo))
        else:
            click.echo(manager.list_slaves(context, repo))
    except MirrorError as e:
        _fail(ctx, e)
