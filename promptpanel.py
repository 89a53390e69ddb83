#!/usr/bin/env python3
"""
promptpanel - A personal prompt manager

Commands:
  add          Create a prompt
  edit         Update a prompt's title, content or tags
  delete       Delete a prompt
  list         List prompts, optionally searching or filtering by tags
  show         Show a specific prompt
  toggle-view  Switch a prompt between plain and rendered view
  reorder      Put prompts in a new order
  export       Write all prompts to prompts_export.json
  import       Merge prompts from a JSON export
  tags         Add/remove/list tags
  theme        Show or set the display theme
  status       Show repository status
  diff         Show uncommitted changes
  log          Show change history
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from panel.backends import FileBackend
from panel.config import default_repo_path
from panel.errors import PromptPanelError
from panel.file_reader import ImportSource
from panel.git_manager import GitManager
from panel.preferences import Preferences
from panel.prompt_store import PromptStore
from panel.tag_manager import TagManager


def open_store(args: argparse.Namespace) -> PromptStore:
    return PromptStore(FileBackend(args.repo))


def commit(args: argparse.Namespace, message: str) -> None:
    """Record the change in the repository history unless --no-commit."""
    if args.no_commit:
        return
    GitManager(args.repo).commit(message)


def read_content(args: argparse.Namespace):
    """Content from --file, --message, or stdin; None if none was given."""
    if args.file:
        return Path(args.file).read_text(encoding="utf-8")
    if args.message is not None:
        return args.message
    if args.stdin:
        print("Reading from stdin (Ctrl+D to finish)...")
        return sys.stdin.read()
    return None


def print_prompt_line(prompt, index: int) -> None:
    tags_str = f"[{', '.join(prompt.tags)}]" if prompt.tags else ""
    print(f"  {index:3}. {prompt.title:40} {prompt.id}  {tags_str}")


def cmd_add(args: argparse.Namespace) -> int:
    """Create a prompt."""
    try:
        content = read_content(args)
        if not args.title.strip() or not (content or "").strip():
            print("Error: title and content are required", file=sys.stderr)
            return 1

        store = open_store(args)
        prompts = store.create(args.title.strip(), content.strip(), args.tags or [])
        created = prompts[-1]

        print(f"Saved prompt: {created.id}")
        if created.tags:
            print(f"Tags: {', '.join(created.tags)}")

        commit(args, f"Add prompt: {created.title}")
        return 0

    except (PromptPanelError, OSError, UnicodeDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_edit(args: argparse.Namespace) -> int:
    """Update an existing prompt."""
    try:
        store = open_store(args)
        prompt = store.get(args.prompt_id)
        if prompt is None:
            print(f"No prompt with id {args.prompt_id}, nothing changed")
            return 0

        content = read_content(args)
        if args.title is not None:
            prompt.title = args.title.strip()
        if content is not None:
            prompt.content = content.strip()
        if args.tags is not None:
            prompt.tags = args.tags

        store.update(prompt)
        print(f"Updated prompt: {prompt.id}")

        commit(args, f"Edit prompt: {prompt.title}")
        return 0

    except (PromptPanelError, OSError, UnicodeDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_delete(args: argparse.Namespace) -> int:
    """Delete a prompt."""
    try:
        store = open_store(args)
        before = len(store.load())
        prompts = store.delete(args.prompt_id)

        if len(prompts) == before:
            print(f"No prompt with id {args.prompt_id}, nothing changed")
            return 0

        Preferences(store.backend).forget(args.prompt_id)
        print(f"Deleted prompt: {args.prompt_id}")

        commit(args, f"Delete prompt: {args.prompt_id}")
        return 0

    except PromptPanelError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_list(args: argparse.Namespace) -> int:
    """List prompts with optional search and tag filtering."""
    store = open_store(args)

    if args.tags:
        prompts = TagManager(store).filter_by_tags(args.tags, match_all=args.match_all)
    else:
        prompts = store.load()

    if args.search:
        prompts = [p for p in prompts if p.matches(args.search)]

    if not prompts:
        print("No prompts found.")
        return 0

    print(f"Found {len(prompts)} prompts:")
    for index, prompt in enumerate(prompts, 1):
        print_prompt_line(prompt, index)
        if args.verbose:
            for line in prompt.content.splitlines()[:3]:
                print(f"         {line}")

    return 0


def cmd_show(args: argparse.Namespace) -> int:
    """Show a specific prompt."""
    store = open_store(args)
    prompt = store.get(args.prompt_id)
    if prompt is None:
        print(f"Error: Prompt not found: {args.prompt_id}", file=sys.stderr)
        return 1

    prefs = Preferences(store.backend)
    view = args.view or prefs.get_view_mode(prompt.id)

    print(f"Prompt: {prompt.title}")
    print(f"ID: {prompt.id}")
    if prompt.tags:
        print(f"Tags: {', '.join('#' + t for t in prompt.tags)}")
    print(f"View: {view}")
    print("\n" + "=" * 60)
    print(prompt.content)
    print("=" * 60)

    return 0


def cmd_toggle_view(args: argparse.Namespace) -> int:
    """Switch a prompt between plain and rendered view."""
    try:
        store = open_store(args)
        if store.get(args.prompt_id) is None:
            print(f"Error: Prompt not found: {args.prompt_id}", file=sys.stderr)
            return 1

        mode = Preferences(store.backend).toggle_view_mode(args.prompt_id)
        print(f"View for {args.prompt_id}: {mode}")
        return 0

    except PromptPanelError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_reorder(args: argparse.Namespace) -> int:
    """Reorder prompts; prompts not listed are removed unless --keep-rest."""
    try:
        store = open_store(args)
        ordered_ids = list(args.ids)

        if args.keep_rest:
            listed = set(ordered_ids)
            ordered_ids.extend(p.id for p in store.load() if p.id not in listed)

        prompts = store.reorder(ordered_ids)

        print(f"New order ({len(prompts)} prompts):")
        for index, prompt in enumerate(prompts, 1):
            print_prompt_line(prompt, index)

        commit(args, "Reorder prompts")
        return 0

    except PromptPanelError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_export(args: argparse.Namespace) -> int:
    """Export all prompts as JSON."""
    try:
        store = open_store(args)
        if args.output == "-":
            print(store.export())
        else:
            path = store.write_export(args.output)
            print(f"Data exported as {path}")
        return 0

    except (PromptPanelError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_import(args: argparse.Namespace) -> int:
    """Import prompts from a JSON export, merging by id."""
    try:
        store = open_store(args)
        source = ImportSource(Path(args.file), media_type=args.media_type)
        prompts = asyncio.run(store.import_file(source))

        print(f"Data imported successfully! ({len(prompts)} prompts)")

        commit(args, f"Import prompts from {source.name}")
        return 0

    except PromptPanelError as e:
        print(f"Error importing data: {e}", file=sys.stderr)
        return 1


def cmd_tags(args: argparse.Namespace) -> int:
    """Manage tags on prompts."""
    try:
        store = open_store(args)
        tag_mgr = TagManager(store)

        if args.action in ("add", "remove"):
            if not args.prompt_id or not args.tags:
                print(f"Error: --prompt-id and --tags required for {args.action}", file=sys.stderr)
                return 1

            if store.get(args.prompt_id) is None:
                print(f"No prompt with id {args.prompt_id}, nothing changed")
                return 0

            if args.action == "add":
                tag_mgr.add_tags(args.prompt_id, args.tags)
                print(f"Added tags to {args.prompt_id}: {', '.join(args.tags)}")
                commit(args, f"Add tags to {args.prompt_id}: {', '.join(args.tags)}")
            else:
                tag_mgr.remove_tags(args.prompt_id, args.tags)
                print(f"Removed tags from {args.prompt_id}: {', '.join(args.tags)}")
                commit(args, f"Remove tags from {args.prompt_id}: {', '.join(args.tags)}")

        elif args.action == "list":
            tag_counts = tag_mgr.get_all_tags_with_counts()
            print("All tags:")
            for tag, count in sorted(tag_counts.items(), key=lambda x: (-x[1], x[0])):
                print(f"  {tag:20} ({count} prompts)")

        return 0

    except PromptPanelError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_theme(args: argparse.Namespace) -> int:
    """Show or set the display theme."""
    try:
        prefs = Preferences(FileBackend(args.repo))
        if args.name:
            prefs.set_theme(args.name)
            print(f"Theme \"{args.name.capitalize()}\" applied!")
        else:
            print(f"Theme: {prefs.get_theme()}")
        return 0

    except (PromptPanelError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_status(args: argparse.Namespace) -> int:
    """Show repository status."""
    git_mgr = GitManager(args.repo)
    status = git_mgr.get_status()

    print("Repository status:")
    print(f"  Branch: {status['branch']}")
    print(f"  Modified: {len(status['modified'])}")
    print(f"  Untracked: {len(status['untracked'])}")

    if args.verbose:
        for label, files in (("Modified", status["modified"]), ("Untracked", status["untracked"])):
            if files:
                print(f"\n{label} files:")
                for file in files:
                    print(f"  • {file}")

    return 0


def cmd_diff(args: argparse.Namespace) -> int:
    """Show diff of working directory."""
    diff = GitManager(args.repo).get_diff(staged=args.staged)
    print(diff if diff else "No changes")
    return 0


def cmd_log(args: argparse.Namespace) -> int:
    """Show change history."""
    for entry in GitManager(args.repo).get_log(args.limit):
        print(f"  {entry['sha'][:8]}  {entry['date'][:19]}  {entry['message']}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="promptpanel",
        description="promptpanel - personal prompt manager",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )

    parser.add_argument(
        "--repo",
        default=str(default_repo_path()),
        help="Repository path (default: $PROMPTPANEL_HOME or ~/.promptpanel)"
    )
    parser.add_argument("--no-commit", action="store_true", help="Skip recording changes in git")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Add command
    add_parser = subparsers.add_parser("add", help="Create a prompt")
    add_parser.add_argument("--title", "-t", required=True, help="Prompt title")
    add_parser.add_argument("--tags", nargs="+", help="Tags to apply")
    add_parser.add_argument("--file", "-f", help="Read prompt from file")
    add_parser.add_argument("--message", "-m", help="Prompt content (inline)")
    add_parser.add_argument("--stdin", action="store_true", help="Read prompt from stdin")

    # Edit command
    edit_parser = subparsers.add_parser("edit", help="Edit a prompt")
    edit_parser.add_argument("prompt_id", help="Prompt ID")
    edit_parser.add_argument("--title", "-t", help="New title")
    edit_parser.add_argument("--tags", nargs="*", help="Replace tags (no values clears them)")
    edit_parser.add_argument("--file", "-f", help="Read new content from file")
    edit_parser.add_argument("--message", "-m", help="New content (inline)")
    edit_parser.add_argument("--stdin", action="store_true", help="Read new content from stdin")

    # Delete command
    delete_parser = subparsers.add_parser("delete", help="Delete a prompt")
    delete_parser.add_argument("prompt_id", help="Prompt ID")

    # List command
    list_parser = subparsers.add_parser("list", help="List prompts")
    list_parser.add_argument("--search", "-s", help="Search title, content and tags")
    list_parser.add_argument("--tags", nargs="+", help="Filter by tags")
    list_parser.add_argument("--match-all", action="store_true", help="Require all tags")
    list_parser.add_argument("--verbose", "-v", action="store_true", help="Show the start of each prompt")

    # Show command
    show_parser = subparsers.add_parser("show", help="Show a prompt")
    show_parser.add_argument("prompt_id", help="Prompt ID")
    show_parser.add_argument("--view", choices=["plain", "rendered"], help="Override the saved view mode")

    # Toggle-view command
    toggle_parser = subparsers.add_parser("toggle-view", help="Toggle plain/rendered view")
    toggle_parser.add_argument("prompt_id", help="Prompt ID")

    # Reorder command
    reorder_parser = subparsers.add_parser("reorder", help="Reorder prompts")
    reorder_parser.add_argument("ids", nargs="+", help="Prompt IDs in the new order")
    reorder_parser.add_argument(
        "--keep-rest",
        action="store_true",
        help="Keep unlisted prompts after the listed ones instead of removing them"
    )

    # Export command
    export_parser = subparsers.add_parser("export", help="Export prompts to JSON")
    export_parser.add_argument(
        "--output", "-o",
        default=".",
        help="Directory for prompts_export.json, or '-' for stdout (default: .)"
    )

    # Import command
    import_parser = subparsers.add_parser("import", help="Import prompts from JSON")
    import_parser.add_argument("file", help="JSON file to import")
    import_parser.add_argument("--media-type", help="Declared media type (default: guessed from name)")

    # Tags command
    tags_parser = subparsers.add_parser("tags", help="Manage tags")
    tags_parser.add_argument("action", choices=["add", "remove", "list"], help="Tag action")
    tags_parser.add_argument("--prompt-id", help="Prompt ID")
    tags_parser.add_argument("--tags", nargs="+", help="Tags")

    # Theme command
    theme_parser = subparsers.add_parser("theme", help="Show or set theme")
    theme_parser.add_argument("name", nargs="?", help="Theme to apply")

    # Status command
    status_parser = subparsers.add_parser("status", help="Show status")
    status_parser.add_argument("--verbose", "-v", action="store_true")

    # Diff command
    diff_parser = subparsers.add_parser("diff", help="Show diff")
    diff_parser.add_argument("--staged", action="store_true", help="Show staged changes")

    # Log command
    log_parser = subparsers.add_parser("log", help="Show history")
    log_parser.add_argument("--limit", "-n", type=int, default=20, help="Number of entries")

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format='%(asctime)s [%(levelname)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    if not args.command:
        parser.print_help()
        return 1

    # Initialize repo if needed
    git_mgr = GitManager(args.repo)
    if not git_mgr.is_initialized():
        git_mgr.init()
        print(f"Initialized repository at {args.repo}")

    handlers = {
        "add": cmd_add,
        "edit": cmd_edit,
        "delete": cmd_delete,
        "list": cmd_list,
        "show": cmd_show,
        "toggle-view": cmd_toggle_view,
        "reorder": cmd_reorder,
        "export": cmd_export,
        "import": cmd_import,
        "tags": cmd_tags,
        "theme": cmd_theme,
        "status": cmd_status,
        "diff": cmd_diff,
        "log": cmd_log,
    }

    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
