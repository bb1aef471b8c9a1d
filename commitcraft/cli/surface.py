"""Terminal Surface - Render projections and commit messages to the console."""

from commitcraft.cli.utils import clean_commit_message
from commitcraft.output import bold, dim, info, colorize_commit_type, colorize_status, print_warning
from commitcraft.presenter import Projection, ResourceView


class TerminalSurface:
    """PresentationSurface that prints to stdout.

    `show_changes=False` keeps mutation-triggered renders quiet for commands
    that only care about the commit message.
    """

    def __init__(self, max_shown: int = 20, show_changes: bool = True, show_ids: bool = False):
        self.max_shown = max_shown
        self.show_changes = show_changes
        self.show_ids = show_ids
        self.message = ""
        self.renders = 0

    def render(self, projection: Projection) -> None:
        self.renders += 1
        if not self.show_changes:
            return
        if not projection.staged and not projection.unstaged:
            print(dim("No changes."))
            return
        self._render_group("Staged Changes", projection.staged)
        self._render_group("Changes", projection.unstaged)

    def _render_group(self, title: str, views: tuple[ResourceView, ...]) -> None:
        if not views:
            return
        print(bold(f"{title} ({len(views)})"))
        shown = views[:self.max_shown]
        for view in shown:
            location = f"  {dim(view.path)}" if view.path != '.' else ""
            ident = f"  {dim('#' + view.id)}" if self.show_ids else ""
            print(f"  {colorize_status(view.glyph)}  {view.name}{location}{ident}")
        remaining = len(views) - len(shown)
        if remaining > 0:
            print(dim(f"  ... and {remaining} more files"))

    def set_message(self, text: str) -> None:
        self.message = clean_commit_message(text) if text else ""

    def show_info(self, text: str) -> None:
        print_warning(text)


def display_message(message: str) -> None:
    """Display commit message with horizontal rules and colored type."""
    colored = colorize_commit_type(message)
    lines = colored.split('\n')
    # Use raw message for width calculation (no ANSI codes)
    raw_lines = message.split('\n')
    width = max((len(line) for line in raw_lines), default=40)
    print(f"\n{dim('─' * width)}")
    print(bold(lines[0]))
    for line in lines[1:]:
        print(line)
    print(dim('─' * width))


def display_roots(roots: list[str]) -> None:
    if len(roots) > 1:
        print(dim("Repositories:"))
        for root in roots:
            print(dim(f"  {info(root)}"))
