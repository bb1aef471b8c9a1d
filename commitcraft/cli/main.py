"""CLI Main Entry Point"""

import asyncio
import logging
import os
import sys
from pathlib import Path

from commitcraft.config import Config, load_config
from commitcraft.git import GitCliGateway, GitError
from commitcraft.llm import get_client, GenerationError
from commitcraft.orchestrator import CommitMessageOrchestrator, is_guidance
from commitcraft.output import success, warning, dim, bold, info, print_error, print_success, CHECK, Spinner
from commitcraft.presenter import SyncPresenter, UnknownFileError, resource_id

from commitcraft.cli.args import parse_args
from commitcraft.cli.commands import display_config, run_setup, run_install_completion
from commitcraft.cli.surface import TerminalSurface, display_message, display_roots
from commitcraft.cli.utils import copy_to_clipboard, edit_message, confirm


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _get_provider_and_model(args, config):
    """Resolve provider, model and base URL from args, env, or config.

    Precedence: CLI args > environment variables > config file
    """
    provider = args.provider or os.environ.get('COMMITCRAFT_PROVIDER') or config.provider
    model = args.model or os.environ.get('COMMITCRAFT_MODEL') or config.model
    env_base_url = None if provider == 'ollama' else os.environ.get('OPENAI_BASE_URL')
    base_url = args.base_url or env_base_url or config.base_url
    return provider, model, base_url


def _display_root(roots: list[str]) -> str | None:
    if not roots:
        return None
    if len(roots) == 1:
        return roots[0]
    return os.path.commonpath(roots)


def _ids_for(path: str) -> list[str]:
    """Candidate presentation ids for a user-supplied path."""
    candidates = {os.path.abspath(path), str(Path(path).resolve())}
    return [resource_id(candidate) for candidate in candidates]


def _copy_and_report(message, no_copy):
    """Copy message to clipboard and print result."""
    if no_copy:
        return
    copied, reason = copy_to_clipboard(message)
    if copied:
        print(f"{success(CHECK)} Copied to clipboard!")
    else:
        print(f"{warning('!')} Could not copy to clipboard{': ' + reason if reason else ''}")
        print(dim("  Select the message above to copy manually."))


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

async def _status(presenter: SyncPresenter, args) -> int:
    await presenter.refresh()
    return 0


async def _mutate(presenter: SyncPresenter, args) -> int:
    command = args.command
    if not args.all and not args.paths:
        print_error(f"Nothing to {command}. Pass file paths or --all.")
        return 1

    projection = await presenter.refresh()
    if command == 'discard' and not args.yes:
        target = "all changes" if args.all else f"changes to {len(args.paths)} file(s)"
        if not sys.stdin.isatty():
            print_error("Refusing to discard without confirmation. Pass --yes.")
            return 1
        if not confirm(f"Discard {target}? This cannot be undone."):
            print(dim("Cancelled."))
            return 0

    if args.all:
        relay = {
            'stage': presenter.request_stage_all,
            'unstage': presenter.request_unstage_all,
            'discard': presenter.request_discard_all,
        }[command]
        await relay()
        await presenter.settle()
        return 0

    relay = {
        'stage': presenter.request_stage,
        'unstage': presenter.request_unstage,
        'discard': presenter.request_discard,
    }[command]

    exit_code = 0
    for path in args.paths:
        file_id = next((i for i in _ids_for(path) if projection.path_for(i)), None)
        if file_id is None:
            print_error(f"{path}: no changes to {command}")
            exit_code = 1
            continue
        try:
            await relay(file_id)
        except (GitError, UnknownFileError) as e:
            print_error(str(e))
            exit_code = 1
    await presenter.settle()
    return exit_code


async def _commit(presenter: SyncPresenter, args) -> int:
    message = args.message
    if message is None:
        message = edit_message("") or ""
    return await _commit_message(presenter, message)


async def _interactive_action(presenter: SyncPresenter, surface: TerminalSurface, args) -> int:
    """Offer commit/edit/regenerate after a message was generated."""
    while True:
        try:
            action = input(f"\n{dim('(c)ommit, (e)dit, (r)egenerate, or Enter to accept: ')}").strip().lower()
        except (KeyboardInterrupt, EOFError):
            return 0

        if action == 'c':
            return await _commit_message(presenter, surface.message)
        if action == 'e':
            edited = edit_message(surface.message)
            if edited:
                presenter.set_message(edited)
                display_message(surface.message)
                _copy_and_report(surface.message, args.no_copy)
            continue
        if action == 'r':
            print(f"\nRegenerating... ", end='', flush=True)
            if await _run_generation(presenter) != 0:
                return 1
            print(success("done!"))
            display_message(surface.message)
            _copy_and_report(surface.message, args.no_copy)
            continue
        return 0


async def _commit_message(presenter: SyncPresenter, message: str) -> int:
    try:
        roots = await presenter.request_commit(message)
    except GitError as e:
        print_error(str(e))
        return 1
    for root in roots:
        print_success(f"Committed in {root}")
    await presenter.settle()
    return 0


async def _run_generation(presenter: SyncPresenter) -> int:
    try:
        with Spinner():
            text = await presenter.request_generate()
    except GenerationError as e:
        print()
        print_error(str(e))
        return 1
    if is_guidance(text):
        return 1
    return 0


async def _generate(presenter: SyncPresenter, surface: TerminalSurface, args) -> int:
    is_pipe = not sys.stdout.isatty()
    is_interactive = sys.stdin.isatty() and not is_pipe

    projection = await presenter.refresh()
    if projection.staged and not is_pipe:
        print(f"Analyzing {bold(str(len(projection.staged)))} staged files using {info(presenter.orchestrator.ai.name)}... ", end='', flush=True)

    if await _run_generation(presenter) != 0:
        return 1
    if is_pipe:
        print(surface.message)
        return 0

    print(success("done!"))
    display_message(surface.message)

    _copy_and_report(surface.message, args.no_copy)
    if args.commit:
        return await _commit_message(presenter, surface.message)
    if is_interactive:
        return await _interactive_action(presenter, surface, args)
    return 0


async def _watch(presenter: SyncPresenter, gateway: GitCliGateway, args) -> int:
    print(dim(f"Watching for changes every {args.interval:g}s. Press Ctrl+C to stop."))
    while True:
        if await gateway.poll():
            await presenter.settle()
            print()
        await asyncio.sleep(args.interval)


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------

def _build_orchestrator(args, config: Config, gateway: GitCliGateway) -> CommitMessageOrchestrator:
    if args.style:
        config.style = args.style
    if args.no_body:
        config.include_body = False
    if args.language:
        config.language = args.language

    provider, model, base_url = _get_provider_and_model(args, config)
    client = get_client(provider=provider, model=model, base_url=base_url)
    prompt_config = config.prompt_config(hint=args.hint, forced_type=args.type)
    return CommitMessageOrchestrator(gateway, client, prompt_config)


async def _run(args, config: Config) -> int:
    command = args.command
    try:
        gateway = GitCliGateway(args.repo or [Path.cwd()])
    except GitError as e:
        print_error(str(e))
        return 1

    if not gateway.roots:
        print_error("Not inside a git repository")
        return 1

    orchestrator = None
    if command == 'generate':
        try:
            orchestrator = _build_orchestrator(args, config, gateway)
        except GenerationError as e:
            print_error(str(e))
            return 1

    surface = TerminalSurface(
        max_shown=config.max_file_display,
        show_changes=command in ('status', 'stage', 'unstage', 'discard', 'watch'),
        show_ids=getattr(args, 'ids', False),
    )
    presenter = SyncPresenter(gateway, surface, orchestrator, root=_display_root(gateway.roots))
    if command in ('status', 'watch'):
        display_roots(gateway.roots)

    try:
        if command == 'status':
            return await _status(presenter, args)
        if command in ('stage', 'unstage', 'discard'):
            return await _mutate(presenter, args)
        if command == 'commit':
            return await _commit(presenter, args)
        if command == 'generate':
            return await _generate(presenter, surface, args)
        if command == 'watch':
            return await _watch(presenter, gateway, args)
    finally:
        await presenter.close()

    print_error(f"Unknown command: {command}")
    return 1


def main() -> int:
    """Main entry point for the CLI."""
    args = parse_args()
    _configure_logging(args.verbose)

    if args.install_completion:
        return run_install_completion()

    if args.command is None:
        args.command = 'status'
        args.ids = False
    if args.command == 'config':
        return run_setup() if args.setup else display_config()

    config = load_config()
    try:
        return asyncio.run(_run(args, config))
    except KeyboardInterrupt:
        print(dim("\nStopped."))
        return 0
