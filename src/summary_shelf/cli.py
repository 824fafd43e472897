import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .config import Settings
from .errors import StoreError
from .models import Book, BookDraft
from .storage import JsonFileStorage
from .store import RecordStore

console = Console()


class ActionFailed(Exception):
    def __init__(self, action: str, cause: Exception):
        super().__init__(f"Failed to {action}: {cause}")
        self.action = action


def print_header(user_name: str, user_type: str):
    console.print(Panel.fit(
        f"""[bold magenta]Summary Shelf[/bold magenta]
[italic]Book summaries in every language[/italic]

Signed in as [bold blue]{user_name}[/bold blue] ({user_type})""",
        border_style="magenta"
    ))


def books_table(title: str, books: List[Book], language: str = "en") -> Table:
    table = Table(title=title)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Title")
    table.add_column("Author")
    table.add_column("Languages")
    table.add_column("Price", justify="right")
    table.add_column("Status")

    for b in books:
        shown = b.localized(language)
        flags = []
        if b.is_purchased:
            flags.append("[green]purchased[/green]")
        if b.is_in_library:
            flags.append("[cyan]in library[/cyan]")
        table.add_row(
            b.id,
            shown.title,
            b.author,
            ", ".join(b.available_languages),
            f"${b.price:.2f}" if b.price else "free",
            " ".join(flags),
        )
    return table


def print_book(book: Book, language: str):
    shown = book.localized(language)
    console.print(Panel(
        f"[italic]{shown.description}[/italic]\n\n{shown.summary}",
        title=f"[bold]{shown.title}[/bold]",
        subtitle=f"by {book.author}",
    ))
    console.print(
        f"[dim]{len(book.notes)} notes, {len(book.highlights)} highlights, "
        f"available in {', '.join(book.available_languages)}[/dim]"
    )


def print_annotations(book: Book):
    notes = Table(title=f"Notes for {book.title}")
    notes.add_column("Created", style="dim")
    notes.add_column("Page", justify="right")
    notes.add_column("Note")
    for n in book.notes:
        notes.add_row(n.created_at.strftime("%Y-%m-%d %H:%M"), str(n.page or ""), n.content)
    console.print(notes)

    highlights = Table(title=f"Highlights for {book.title}")
    highlights.add_column("Created", style="dim")
    highlights.add_column("Color")
    highlights.add_column("Text")
    for h in book.highlights:
        highlights.add_row(h.created_at.strftime("%Y-%m-%d %H:%M"), h.color, h.text)
    console.print(highlights)


async def run_command(store: RecordStore, args: argparse.Namespace):
    cmd = args.command

    if cmd == "books":
        books = await store.get_books()
        console.print(books_table("All books", books, args.lang))

    elif cmd == "library":
        console.print(books_table("My library", await store.get_personal_library(), args.lang))

    elif cmd == "purchased":
        console.print(books_table("Purchased", await store.get_purchased_books(), args.lang))

    elif cmd == "writer-books":
        user = await store.get_current_user()
        writer_id = args.writer or (user.id if user else "")
        console.print(books_table("My published books", await store.get_writer_books(writer_id)))

    elif cmd in ("show", "notes"):
        book = await store.get_book_by_id(args.book_id)
        if book is None:
            console.print(f"[yellow]No book with id {args.book_id}[/yellow]")
            return
        if cmd == "show":
            print_book(book, args.lang)
        else:
            print_annotations(book)

    elif cmd == "buy":
        try:
            ok = await store.purchase_book(args.book_id)
        except StoreError as e:
            raise ActionFailed("purchase book", e) from e
        if not ok:
            raise ActionFailed("purchase book", LookupError(f"no book with id {args.book_id}"))
        console.print("[green]Book purchased successfully![/green]")

    elif cmd in ("add", "submit"):
        draft = BookDraft(
            title=args.title,
            author=args.author,
            description=args.description,
            summary=args.summary,
            languages=args.languages.split(",") if args.languages else None,
            price=args.price,
        )
        try:
            if cmd == "add":
                book = await store.add_book_to_personal_library(draft)
            else:
                user = await store.get_current_user()
                book = await store.submit_writer_book(draft, user.id if user else "")
        except StoreError as e:
            raise ActionFailed("add book", e) from e
        console.print(f"[green]Book added to your library![/green] [dim]({book.id})[/dim]")

    elif cmd == "note":
        try:
            await store.add_note(args.book_id, args.content.strip(), page=args.page)
        except StoreError as e:
            raise ActionFailed("add note", e) from e
        console.print("[green]Note added successfully![/green]")

    elif cmd == "highlight":
        try:
            await store.add_highlight(args.book_id, args.text.strip(), args.color, page=args.page)
        except StoreError as e:
            raise ActionFailed("add highlight", e) from e
        console.print("[green]Text highlighted successfully![/green]")

    elif cmd == "whoami":
        user = await store.get_current_user()
        if user is None:
            raise ActionFailed("load profile", LookupError("user profile unavailable"))
        print_header(user.name, user.type)
        console.print(f"Email: {user.email}")
        console.print(f"Purchased: {len(user.purchased_books)}  In library: {len(user.personal_library)}")

    elif cmd == "switch":
        try:
            await store.update_user_type(args.type)
        except StoreError as e:
            raise ActionFailed("switch user type", e) from e
        console.print(f"[green]Switched to {args.type.capitalize()} mode![/green]")

    elif cmd == "languages":
        table = Table(title="Available languages")
        table.add_column("Code", style="dim")
        table.add_column("Name")
        table.add_column("Native name")
        for lang in store.get_available_languages():
            table.add_row(lang.code, lang.name, lang.native_name)
        console.print(table)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="summary-shelf", description="Browse and annotate book summaries")
    parser.add_argument("--data-dir", help="Directory holding the stored books and profile")
    sub = parser.add_subparsers(dest="command", required=True)

    for name in ("books", "library", "purchased"):
        p = sub.add_parser(name)
        p.add_argument("--lang", default="en")

    p = sub.add_parser("writer-books")
    p.add_argument("--writer", help="Writer id (defaults to the current user)")

    for name in ("show", "notes", "buy"):
        p = sub.add_parser(name)
        p.add_argument("book_id")
        if name == "show":
            p.add_argument("--lang", default="en")

    for name in ("add", "submit"):
        p = sub.add_parser(name)
        p.add_argument("title")
        p.add_argument("--author")
        p.add_argument("--description")
        p.add_argument("--summary")
        p.add_argument("--languages", help="Comma separated language codes")
        p.add_argument("--price", type=float)

    p = sub.add_parser("note")
    p.add_argument("book_id")
    p.add_argument("content")
    p.add_argument("--page", type=int)

    p = sub.add_parser("highlight")
    p.add_argument("book_id")
    p.add_argument("text")
    p.add_argument("--color", default="#FFEB3B")
    p.add_argument("--page", type=int)

    sub.add_parser("whoami")

    p = sub.add_parser("switch")
    p.add_argument("type", choices=["reader", "writer"])

    sub.add_parser("languages")
    return parser


def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    store = RecordStore(JsonFileStorage(args.data_dir or settings.data_dir))
    try:
        asyncio.run(run_command(store, args))
    except ActionFailed as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        root = e.__cause__.__cause__ if e.__cause__ else None
        if root is not None:
            console.print(f"[red]Caused by:[/red] {root}")
        sys.exit(1)


if __name__ == "__main__":
    main()
