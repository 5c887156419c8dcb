"""
komodo-terminal command line.

Runs one-shot commands and exits with the remote exit code:

    komodo-terminal execute container --server prod-1 --container web ls -la
"""

import asyncio
import logging
import logging.config as log_config

import click
from pydantic import BaseModel, ValidationError

from komodo_terminal.config.provider import ClientConfig, EnvConfigProvider
from komodo_terminal.logging_config import get_logging_config
from komodo_terminal.modules.api import (
    ExecuteContainerExecBody,
    ExecuteDeploymentExecBody,
    ExecuteStackExecBody,
    ExecuteTerminalBody,
)
from komodo_terminal.modules.execute import EARLY_EXIT, TerminalRequestError
from komodo_terminal.modules.router import ExecutionTarget, TerminalClient

logger = logging.getLogger("komodo_terminal.cli")

# Options stop at the first word of COMMAND; its own flags pass through untouched
_COMMAND_SETTINGS = {"ignore_unknown_options": True, "allow_interspersed_args": False}


def exit_status(code: str) -> int:
    """Map a remote exit code to a process exit status (1 if not numeric)."""
    if code == EARLY_EXIT:
        return 1
    try:
        return int(code.strip())
    except ValueError:
        return 1


async def _execute(config: ClientConfig, target: ExecutionTarget, body: BaseModel) -> int:
    async with TerminalClient.from_config(config) as client:
        run = {
            ExecutionTarget.TERMINAL: client.execute_terminal,
            ExecutionTarget.CONTAINER: client.execute_container_exec,
            ExecutionTarget.DEPLOYMENT: client.execute_deployment_exec,
            ExecutionTarget.STACK: client.execute_stack_exec,
        }[target]
        try:
            code = await run(body, on_line=click.echo)
        except TerminalRequestError as e:
            result = e.result if isinstance(e.result, dict) else {"error": str(e.result)}
            click.echo(f"Error [{e.status}]: {result.get('error', result)}", err=True)
            for trace in result.get("trace") or []:
                click.echo(f"  {trace}", err=True)
            return 1

    if code == EARLY_EXIT:
        click.echo(code, err=True)
    logger.info(f"{target.value} command finished with exit code {code}")
    return exit_status(code)


def _run(ctx: click.Context, target: ExecutionTarget, body_cls, **fields) -> None:
    try:
        config = EnvConfigProvider().get_client_config()
    except ValueError as e:
        raise click.ClickException(str(e))
    if not config.has_credentials:
        raise click.ClickException(
            "Set KOMODO_JWT or both KOMODO_API_KEY and KOMODO_API_SECRET"
        )

    try:
        body = body_cls(**fields)
    except ValidationError as e:
        raise click.BadParameter(str(e))

    ctx.exit(asyncio.run(_execute(config, target, body)))


@click.group()
@click.option("--log-level", "log_level", default="WARNING", show_default=True)
def main(log_level: str) -> None:
    """Run commands on Komodo servers, containers, deployments and stacks."""
    log_config.dictConfig(get_logging_config(log_level))


@main.group()
def execute() -> None:
    """Run a one-shot command and stream its output."""


@execute.command("terminal", context_settings=_COMMAND_SETTINGS)
@click.option("--server", required=True)
@click.option("--terminal", required=True)
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
@click.pass_context
def execute_terminal(ctx, server, terminal, command):
    """Run COMMAND on a server terminal."""
    _run(ctx, ExecutionTarget.TERMINAL, ExecuteTerminalBody,
         server=server, terminal=terminal, command=" ".join(command))


@execute.command("container", context_settings=_COMMAND_SETTINGS)
@click.option("--server", required=True)
@click.option("--container", required=True)
@click.option("--shell", default="sh", show_default=True)
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
@click.pass_context
def execute_container(ctx, server, container, shell, command):
    """Run COMMAND inside a container."""
    _run(ctx, ExecutionTarget.CONTAINER, ExecuteContainerExecBody,
         server=server, container=container, shell=shell, command=" ".join(command))


@execute.command("deployment", context_settings=_COMMAND_SETTINGS)
@click.option("--deployment", required=True)
@click.option("--shell", default="sh", show_default=True)
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
@click.pass_context
def execute_deployment(ctx, deployment, shell, command):
    """Run COMMAND inside a deployment's container."""
    _run(ctx, ExecutionTarget.DEPLOYMENT, ExecuteDeploymentExecBody,
         deployment=deployment, shell=shell, command=" ".join(command))


@execute.command("stack", context_settings=_COMMAND_SETTINGS)
@click.option("--stack", required=True)
@click.option("--service", required=True)
@click.option("--shell", default="sh", show_default=True)
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
@click.pass_context
def execute_stack(ctx, stack, service, shell, command):
    """Run COMMAND inside a stack service's container."""
    _run(ctx, ExecutionTarget.STACK, ExecuteStackExecBody,
         stack=stack, service=service, shell=shell, command=" ".join(command))


if __name__ == "__main__":
    main()
