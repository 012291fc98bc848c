"""Entry point for the git-dep-keeper command line"""

import sys
from typing import Callable, Dict, List, NamedTuple, Optional

from rich.console import Console

from git_dep_keeper.cli.args import build_parser, parse_args
from git_dep_keeper.config import Config
from git_dep_keeper.core import DepKeeper
from git_dep_keeper.exceptions import DepKeeperError
from git_dep_keeper.logging_config import setup_logging

console = Console(stderr=True, highlight=False)


class CommandSpec(NamedTuple):
    """How a command runs: whether it needs the loaded project and the workspace lock."""
    run: Callable
    needs_project: bool = True
    locks: bool = False


COMMANDS: Dict[str, CommandSpec] = {
    "init": CommandSpec(lambda keeper, project, args: keeper.init(), needs_project=False),
    "status": CommandSpec(lambda keeper, project, args: keeper.status(project, args.names)),
    "get": CommandSpec(lambda keeper, project, args: keeper.get(project, args.names), locks=True),
    "update": CommandSpec(lambda keeper, project, args: keeper.update(project, args.names), locks=True),
    "tag": CommandSpec(lambda keeper, project, args: keeper.tag(project), locks=True),
    "untag": CommandSpec(lambda keeper, project, args: keeper.untag(project), locks=True),
    "git": CommandSpec(
        lambda keeper, project, args: keeper.git(project, args.git_command, args.name, args.git_args),
        locks=True,
    ),
}


def run_command(keeper: DepKeeper, args) -> int:
    """Dispatch parsed arguments to the matching DepKeeper command."""
    spec = COMMANDS[args.command]
    if not spec.needs_project:
        return spec.run(keeper, None, args)

    project = keeper.load()
    if spec.locks:
        with keeper.workspace_lock(project):
            return spec.run(keeper, project, args)
    return spec.run(keeper, project, args)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the application."""
    parsed_args = parse_args(argv)

    if parsed_args.command is None:
        build_parser().print_help()
        return 0

    setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

    try:
        config = Config(
            manifest_file=parsed_args.manifest,
            host_file=parsed_args.host_file,
            remote_name=parsed_args.remote,
            git_timeout=parsed_args.timeout,
            lock_timeout=parsed_args.lock_timeout,
            verbose=parsed_args.verbose,
            debug=parsed_args.debug,
        )
        if parsed_args.debug:
            console.print("[yellow]Configuration:[/yellow]")
            for key, value in config.to_dict().items():
                console.print(f"  {key}: {value}", markup=False)

        keeper = DepKeeper(parsed_args.directory, config)
        return run_command(keeper, parsed_args)
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except (DepKeeperError, ValueError) as e:
        console.print(f"Error: {e}", style="red", markup=False)
        return 1
    except Exception as e:
        console.print(f"Error: {e}", style="red", markup=False)
        if parsed_args.debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
