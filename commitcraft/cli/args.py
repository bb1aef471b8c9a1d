"""CLI Argument Parsing"""

import argparse
import argcomplete

from commitcraft import COMMIT_TYPE_NAMES, __version__

COMMANDS = ('status', 'stage', 'unstage', 'discard', 'generate', 'commit', 'watch', 'config')


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='commitcraft',
        description='Track staged/unstaged changes and generate AI-powered commit messages',
        epilog='Example: commitcraft generate (copies message to clipboard)'
    )

    parser.add_argument('-v', '--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('-C', '--repo', action='append', metavar='PATH', help='Repository root to track (repeatable, default: current directory)')
    parser.add_argument('--verbose', action='store_true', help='Show debug logging')
    parser.add_argument('--install-completion', action='store_true', help='Install shell tab completion')

    sub = parser.add_subparsers(dest='command', metavar='COMMAND')

    status = sub.add_parser('status', help='Show staged and unstaged changes (default)')
    status.add_argument('--ids', action='store_true', help='Show the id of each file')

    for name, verb in (('stage', 'Stage'), ('unstage', 'Unstage'), ('discard', 'Discard working-tree changes of')):
        cmd = sub.add_parser(name, help=f'{verb} files')
        cmd.add_argument('paths', nargs='*', metavar='PATH', help='Files to act on')
        cmd.add_argument('-a', '--all', action='store_true', help='Act on every changed file')
        if name == 'discard':
            cmd.add_argument('-y', '--yes', action='store_true', help='Do not ask for confirmation')

    generate = sub.add_parser('generate', help='Generate a commit message from staged changes')
    generate.add_argument('--hint', type=str, metavar='TEXT', help='Add context: --hint "fixing the login bug"')
    generate.add_argument('-t', '--type', type=str, choices=COMMIT_TYPE_NAMES, help='Force commit type')
    generate.add_argument('-s', '--style', type=str, choices=['conventional', 'simple', 'detailed'], help='Commit message style')
    generate.add_argument('--no-body', action='store_true', help='Generate subject line only, no bullet points')
    generate.add_argument('--language', type=str, metavar='LANG', help='Language of the message (default: English)')
    generate.add_argument('-p', '--provider', type=str, choices=['auto', 'ollama', 'claude', 'openai'], help='LLM provider')
    generate.add_argument('-m', '--model', type=str, metavar='MODEL', help='Model name')
    generate.add_argument('--base-url', type=str, metavar='URL', help='Base URL of an OpenAI-compatible server, or the Ollama host with -p ollama')
    generate.add_argument('--no-copy', action='store_true', help='Print message only, do not copy to clipboard')
    generate.add_argument('--commit', action='store_true', help='Commit with the generated message')

    commit = sub.add_parser('commit', help='Commit staged changes in every repository')
    commit.add_argument('-m', '--message', type=str, metavar='TEXT', help='Commit message (opens $EDITOR when omitted)')

    watch = sub.add_parser('watch', help='Re-render changes whenever the working tree changes')
    watch.add_argument('--interval', type=float, default=2.0, metavar='SECONDS', help='Polling interval (default: 2)')

    config = sub.add_parser('config', help='Show current configuration')
    config.add_argument('--setup', action='store_true', help='Configure defaults')

    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    argcomplete.autocomplete(parser)
    return parser.parse_args(argv)
