"""CLI Utility Functions"""

import os
import re
import shlex
import subprocess
import sys
import tempfile
from pathlib import Path

from commitcraft import COMMIT_TYPE_NAMES

# First line of a conventional message, possibly wrapped in backticks
SUBJECT_RE = re.compile(rf"^[`\s]*({'|'.join(COMMIT_TYPE_NAMES)})[(!:]")

# Model output that follows the message: echoed diffs and code fences
TRAILER_RE = re.compile(r'^(diff --git |@@\s|[+-]{3}\s[ab]/|index [0-9a-f]|```)')

CLIPBOARD_COMMANDS = {
    'win32': [['clip']],
    'darwin': [['pbcopy']],
}
LINUX_CLIPBOARD_COMMANDS = [
    ['wl-copy'],
    ['xclip', '-selection', 'clipboard'],
    ['xsel', '--clipboard', '--input'],
]


def clean_commit_message(text: str) -> str:
    """Cut a model reply down to the commit message it contains."""
    lines = [line.rstrip() for line in text.strip().splitlines()]
    start = next((i for i, line in enumerate(lines) if SUBJECT_RE.match(line)), 0)
    end = next((i for i in range(start + 1, len(lines)) if TRAILER_RE.match(lines[i])), len(lines))
    kept = lines[start:end]
    if kept:
        kept[0] = kept[0].strip('`').strip()
    return '\n'.join(kept).rstrip()


def copy_to_clipboard(text: str) -> tuple[bool, str]:
    """Copy text with the first clipboard tool found. Returns (success, failure_reason)."""
    commands = CLIPBOARD_COMMANDS.get(sys.platform, LINUX_CLIPBOARD_COMMANDS)
    for command in commands:
        try:
            subprocess.run(command, input=text.encode('utf-8'), check=True)
            return True, ""
        except FileNotFoundError:
            continue
        except (subprocess.CalledProcessError, OSError) as e:
            return False, f"Clipboard command failed: {e}"
    if sys.platform.startswith('linux'):
        return False, "Install wl-clipboard, xclip or xsel"
    return False, "No clipboard tool found"


def edit_message(message: str) -> str | None:
    """Open message in $VISUAL or $EDITOR. Returns the edited text, or None if empty or failed."""
    editor = os.environ.get('VISUAL') or os.environ.get('EDITOR')
    if not editor:
        editor = 'notepad' if sys.platform == 'win32' else 'vi'

    fd, name = tempfile.mkstemp(suffix='.gitcommit', text=True)
    path = Path(name)
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(message)
        subprocess.run([*shlex.split(editor), str(path)], check=True)
        return path.read_text(encoding='utf-8').strip() or None
    except (subprocess.CalledProcessError, OSError):
        return None
    finally:
        path.unlink(missing_ok=True)


def confirm(question: str) -> bool:
    """Ask a yes/no question on the terminal. Defaults to no."""
    try:
        return input(f"{question} [y/N]: ").strip().lower() in ('y', 'yes')
    except (KeyboardInterrupt, EOFError):
        return False
