"""Interactive CLI application."""
import logging
import os
from dataclasses import dataclass

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.syntax import Syntax
from rich.table import Table

from topic_tutor.catalog import CatalogError
from topic_tutor.db import DEFAULT_DB_PATH
from topic_tutor.history import (
    get_search_history, get_streak, check_daily_goal, get_study_goals, update_study_goals,
)
from topic_tutor.importer import load_catalog_file
from topic_tutor.progress import (
    category_progress, get_progress_label, get_progress_color, get_study_stats,
)
from topic_tutor.search import search_all
from topic_tutor.seed import load_bundled_catalog
from topic_tutor.session import TutorSession
from topic_tutor.shortcuts import FOCUS_SEARCH, CLOSE_PANEL, parse_key_combo

console = Console()
logger = logging.getLogger(__name__)

NARROW_WIDTH = 80
KEY_COMBOS = ("ctrl+k", "cmd+k", "^k", "esc", "escape")


@dataclass
class ViewState:
    panel_open: bool = True


def is_narrow() -> bool:
    return console.width <= NARROW_WIDTH


def show_welcome(session: TutorSession):
    console.print(Panel(
        "[bold]Topic Tutor[/bold]\n[dim]Browse, search and track your progress[/dim]",
        title="Welcome", border_style="blue",
    ))
    console.print(f"[dim]{session.catalog.topic_count()} topics in "
                  f"{len(session.catalog.categories())} categories[/dim]")


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("categories", "Toggle the category panel"),
        ("cat <id>", "Switch category"),
        ("level <lvl>", "Filter: all, beginner, intermediate, advanced"),
        ("search <text>", "Search the current category (ctrl+k to prompt)"),
        ("clear", "Clear the search"),
        ("find <text>", "Search every category"),
        ("list", "Show the current topic list"),
        ("show <topic>", "Expand or collapse a topic"),
        ("done <topic>", "Toggle completion"),
        ("bookmark <topic>", "Toggle bookmark"),
        ("note <topic>", "Write a note"),
        ("delnote <topic>", "Delete a note"),
        ("bookmarks", "List bookmarked topics"),
        ("dashboard", "Progress and stats"),
        ("history", "Recent searches"),
        ("goals <name=n>", "Show or change study goals"),
        ("reset", "Clear all progress and notes"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<18}[/cyan] {desc}")


def show_categories(session: TutorSession):
    table = Table(title="Categories")
    table.add_column("", width=2)
    table.add_column("Id", style="cyan")
    table.add_column("Category")
    table.add_column("Topics", justify="right")
    table.add_column("Done", justify="right")
    active = session.controller.active_category
    for category in session.catalog.categories():
        pct = category_progress(session.catalog, session.store, category.key)
        marker = "→" if category.key == active else category.glyph
        table.add_row(marker, category.key, category.title, str(len(category.topics)), f"{pct}%")
    console.print(table)


def show_topics(session: TutorSession):
    controller = session.controller
    category = controller.active_category_data
    topics = controller.filtered_topics()
    title = f"{category.glyph} {category.title}".strip()
    filters = [f"level: {controller.difficulty_filter}"]
    if controller.search_query.strip():
        filters.append(f"search: '{controller.search_query.strip()}'")
    table = Table(title=f"{title}  [dim]({', '.join(filters)})[/dim]")
    table.add_column("#", justify="right")
    table.add_column("Topic")
    table.add_column("Level")
    table.add_column("Status")
    for i, topic in enumerate(topics, 1):
        status = []
        if session.store.is_completed(topic.key):
            status.append("[green]✔ done[/green]")
        if session.store.is_bookmarked(topic.key):
            status.append("[yellow]★[/yellow]")
        if session.store.get_note(topic.key) is not None:
            status.append("[dim]note[/dim]")
        table.add_row(str(i), topic.title, topic.difficulty.title(), " ".join(status))
    console.print(table)
    if not topics:
        console.print("[yellow]No topics match the current filters.[/yellow]")
    for topic in topics:
        if session.store.is_expanded(topic.key):
            show_topic_detail(session, topic)


def show_topic_detail(session: TutorSession, topic):
    console.print(Panel(topic.description or "[dim]No description[/dim]", title=topic.title, border_style="cyan"))
    for example in topic.examples:
        console.print(f"[bold]{example.title}[/bold]")
        console.print(Syntax(example.code, "python", theme="ansi_dark"))
        if example.note:
            console.print(f"[dim]{example.note}[/dim]")
    note = session.store.get_note(topic.key)
    if note is not None:
        console.print(Panel(note or "[dim](empty note)[/dim]", title="Your note", border_style="yellow"))


def render(session: TutorSession, view: ViewState):
    if view.panel_open:
        show_categories(session)
    show_topics(session)


def cmd_dashboard(session: TutorSession):
    stats = get_study_stats(session.catalog, session.store)
    percent = stats["progress"]
    label = get_progress_label(percent)
    color = get_progress_color(percent)
    streak = get_streak(session.db_path)
    console.print(Panel(f"[bold]Level {stats['level']}[/bold]  ·  {stats['xp']} XP "
                        f"(next level at {stats['xp_for_next_level']})",
                        title="Progress Dashboard", border_style="blue"))

    bar_filled = percent // 5
    bar = f"[{color}]{'█' * bar_filled}{'░' * (20 - bar_filled)}[/{color}]"
    console.print(f"\n  Overall Progress: [bold]{percent}%[/bold] {bar} [{color}]{label}[/{color}]\n")

    table = Table(title="Category Breakdown")
    table.add_column("Category", style="cyan")
    table.add_column("Progress", justify="right")
    table.add_column("Status")
    for category in session.catalog.categories():
        pct = category_progress(session.catalog, session.store, category.key)
        cat_color = get_progress_color(pct)
        table.add_row(category.title, f"{pct}%", f"[{cat_color}]{get_progress_label(pct)}[/{cat_color}]")
    console.print(table)

    console.print(f"\n  Completed: [bold]{stats['completed_count']}/{stats['total_topics']}[/bold]  |  "
                  f"Bookmarked: [bold]{stats['bookmarked_count']}[/bold]  |  "
                  f"Categories: [bold]{stats['categories_completed']}/{stats['total_categories']}[/bold]  |  "
                  f"Streak: [bold]{streak}[/bold] days")
    goal = check_daily_goal(session.db_path)
    goal_color = "green" if goal["met"] else "yellow"
    console.print(f"  Daily goal: [{goal_color}]{goal['current']}/{goal['target']}[/{goal_color}] topics today")
    streak_goal = get_study_goals(session.db_path)["streak_goal"]
    if streak >= streak_goal:
        console.print(f"  [green]Streak goal of {streak_goal} days reached![/green]")


def cmd_bookmarks(session: TutorSession):
    keys = session.store.bookmarked_keys()
    topics = [t for t in session.catalog.all_topics() if t.key in keys]
    if not topics:
        console.print("[yellow]No bookmarks yet.[/yellow]")
        return
    table = Table(title="Bookmarks")
    table.add_column("Id", style="cyan")
    table.add_column("Topic")
    table.add_column("Category")
    for topic in topics:
        table.add_row(topic.key, topic.title, session.catalog.category_of(topic.key))
    console.print(table)


def cmd_find(session: TutorSession, text: str):
    matches = search_all(session.catalog, text)
    if not matches:
        console.print(f"[yellow]Nothing matches '{text}'.[/yellow]")
        return
    table = Table(title=f"Results for '{text.strip()}'")
    table.add_column("Id", style="cyan")
    table.add_column("Topic")
    table.add_column("Category")
    for topic in matches:
        table.add_row(topic.key, topic.title, session.catalog.category_of(topic.key))
    console.print(table)


def cmd_history(session: TutorSession):
    history = get_search_history(session.db_path)
    if not history:
        console.print("[dim]No searches yet.[/dim]")
        return
    for query in history:
        console.print(f"  [cyan]{query}[/cyan]")


def cmd_goals(session: TutorSession, arg: str):
    if arg:
        name, _, value = arg.partition("=")
        try:
            update_study_goals(session.db_path, **{name.strip(): int(value.strip())})
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            return
        console.print("[green]Goals updated.[/green]")
    table = Table(title="Study Goals")
    table.add_column("Goal", style="cyan")
    table.add_column("Target", justify="right")
    for name, target in get_study_goals(session.db_path).items():
        table.add_row(name, str(target))
    console.print(table)


def cmd_reset(session: TutorSession):
    confirm = Prompt.ask("[red]Clear all progress, notes and history?[/red]", choices=["y", "n"], default="n")
    if confirm == "y":
        session.reset()
        console.print("[green]Progress reset.[/green]")
    else:
        console.print("[dim]Nothing changed.[/dim]")


def cmd_note(session: TutorSession, topic):
    current = session.store.get_note(topic.key)
    text = Prompt.ask(f"Note for [cyan]{topic.title}[/cyan]", default=current or "")
    session.store.save_note(topic.key, text)
    console.print("[green]Note saved.[/green]")


def focus_search(session: TutorSession):
    query = Prompt.ask("[bold]Search[/bold]", default=session.controller.search_query)
    session.search(query)
    show_topics(session)


def close_panel(view: ViewState):
    view.panel_open = False


def attach_view(session: TutorSession, view: ViewState):
    """Register shortcut handlers and react to controller signals."""
    session.shortcuts.register(FOCUS_SEARCH, lambda: focus_search(session))
    session.shortcuts.register(CLOSE_PANEL, lambda: close_panel(view))

    def on_close_panel():
        if is_narrow():
            close_panel(view)

    session.controller.on_close_panel.subscribe(on_close_panel)
    session.progress.subscribe(
        lambda percent: console.print(f"[dim]Overall progress: {percent}%[/dim]")
    )


TOPIC_COMMANDS = {"show", "done", "bookmark", "note", "delnote"}


def handle_command(session: TutorSession, view: ViewState, line: str) -> bool:
    """Run one command line. Returns False when the user asked to quit."""
    command, _, arg = line.strip().partition(" ")
    command = command.lower()
    arg = arg.strip()

    if command in KEY_COMBOS:
        event = parse_key_combo(command)
        if not session.shortcuts.dispatch(event):
            console.print("[dim]No action for that key.[/dim]")
        return True
    if command in ("quit", "exit", "q"):
        return False

    if command in TOPIC_COMMANDS:
        topic = session.resolve_topic(arg)
        if topic is None:
            console.print(f"[red]Unknown topic: {arg or '(none)'}[/red]")
            return True
        if command == "show":
            if session.store.toggle_expanded(topic.key):
                show_topic_detail(session, topic)
        elif command == "done":
            state = "completed" if session.toggle_completed(topic.key) else "not completed"
            console.print(f"[green]{topic.title}: {state}[/green]")
        elif command == "bookmark":
            state = "bookmarked" if session.store.toggle_bookmark(topic.key) else "removed from bookmarks"
            console.print(f"[yellow]{topic.title}: {state}[/yellow]")
        elif command == "note":
            cmd_note(session, topic)
        elif command == "delnote":
            if session.store.delete_note(topic.key):
                console.print("[green]Note deleted.[/green]")
            else:
                console.print("[dim]No note to delete.[/dim]")
        return True

    if command == "categories":
        view.panel_open = not view.panel_open
        render(session, view)
    elif command == "cat":
        if session.controller.set_category(arg):
            render(session, view)
        else:
            console.print(f"[red]Unknown category: {arg}[/red]")
    elif command == "level":
        if session.controller.set_difficulty_filter(arg):
            show_topics(session)
        else:
            console.print("[red]Level must be one of: all, beginner, intermediate, advanced[/red]")
    elif command == "search":
        session.search(arg)
        show_topics(session)
    elif command == "clear":
        session.controller.clear_search_query()
        show_topics(session)
    elif command == "find":
        cmd_find(session, arg)
    elif command == "list":
        render(session, view)
    elif command == "bookmarks":
        cmd_bookmarks(session)
    elif command == "dashboard":
        cmd_dashboard(session)
    elif command == "history":
        cmd_history(session)
    elif command == "goals":
        cmd_goals(session, arg)
    elif command == "reset":
        cmd_reset(session)
    elif command == "help":
        show_menu()
    else:
        console.print("[red]Unknown command. Type 'help' for the list.[/red]")
    return True


def configure_logging():
    level = os.environ.get("TOPIC_TUTOR_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def main():
    configure_logging()
    catalog_path = os.environ.get("TOPIC_TUTOR_CATALOG")
    try:
        catalog = load_catalog_file(catalog_path) if catalog_path else load_bundled_catalog()
    except CatalogError as e:
        console.print(f"[red]Cannot load catalog: {escape(str(e))}[/red]")
        raise SystemExit(1)
    session = TutorSession(catalog, DEFAULT_DB_PATH).load()
    view = ViewState(panel_open=not is_narrow())
    attach_view(session, view)

    show_welcome(session)
    show_menu()
    render(session, view)

    while True:
        choice = Prompt.ask("\n[bold]>[/bold]", default="list")
        try:
            if not handle_command(session, view, choice):
                console.print("[dim]Happy learning![/dim]")
                break
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            logger.debug("Command failed: %s", choice, exc_info=True)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
