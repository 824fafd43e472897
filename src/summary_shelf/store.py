import asyncio
import logging
import uuid
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from .catalog import BOOKS_KEY, USER_KEY, LANGUAGES, seed_books, default_user
from .errors import (
    BookNotFound,
    StorageError,
    StorageUnavailable,
    StorageWriteError,
    ValidationError,
)
from .models import Book, BookDraft, Highlight, Language, Note, User, utcnow
from .storage import KeyValueStorage

logger = logging.getLogger(__name__)

BooksAdapter = TypeAdapter(List[Book])

USER_TYPES = ("reader", "writer")


def new_id() -> str:
    return str(uuid.uuid4())


def _blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


class RecordStore:
    """
    Owns the book collection and the single user profile.

    Every read-modify-write cycle runs under one asyncio.Lock, so mutations
    issued concurrently on the same event loop are applied one after another
    and none of them overwrites another's result with a stale copy.
    """

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage
        self._lock = asyncio.Lock()

    # ── raw medium access ────────────────────────────────────────────

    async def _get(self, key: str) -> Optional[str]:
        try:
            return await self.storage.get(key)
        except StorageError:
            raise
        except Exception as e:
            raise StorageUnavailable(f"Reading {key!r} failed: {e}") from e

    async def _set(self, key: str, value: str):
        try:
            await self.storage.set(key, value)
        except StorageError:
            raise
        except Exception as e:
            raise StorageWriteError(f"Writing {key!r} failed: {e}") from e

    # ── books ────────────────────────────────────────────────────────

    async def _read_books(self) -> Optional[List[Book]]:
        raw = await self._get(BOOKS_KEY)
        if raw is None:
            return None
        try:
            return BooksAdapter.validate_json(raw)
        except PydanticValidationError as e:
            raise StorageUnavailable(f"Stored books could not be decoded: {e}") from e

    async def _write_books(self, books: List[Book]):
        await self._set(BOOKS_KEY, BooksAdapter.dump_json(books, by_alias=True).decode("utf-8"))

    async def _load_or_seed(self) -> List[Book]:
        # Caller must hold self._lock
        books = await self._read_books()
        if books is None:
            logger.info("No stored books, writing the seed set")
            books = seed_books()
            await self._write_books(books)
        return books

    async def load_books(self) -> List[Book]:
        """
        Return the stored collection, seeding empty storage on first use.

        Raises StorageUnavailable when the medium cannot be read or holds
        something that is not a book collection.
        """
        books = await self._read_books()
        if books is not None:
            return books
        async with self._lock:
            return await self._load_or_seed()

    async def get_books(self) -> List[Book]:
        """Like load_books, but falls back to the seed set when storage is broken."""
        try:
            return await self.load_books()
        except StorageError as e:
            logger.warning(f"Error getting books, using built-in sample set: {e}")
            return seed_books()

    async def save_books(self, books: List[Book]):
        """Replace the whole stored collection."""
        async with self._lock:
            await self._write_books(books)

    async def get_book_by_id(self, book_id: str) -> Optional[Book]:
        # A storage failure is reported the same way as a missing book
        try:
            books = await self.load_books()
        except StorageError as e:
            logger.warning(f"Error looking up book {book_id}: {e}")
            return None
        return _find(books, book_id)

    async def add_book_to_personal_library(
        self, draft: Optional[BookDraft] = None, **fields
    ) -> Book:
        """
        Create a book from caller-supplied fields and put it on the owner's shelf.

        Accepts a BookDraft, the same fields as keyword arguments, or both, in
        which case the keyword arguments win. Unset or empty fields get
        defaults; the new book is always marked purchased and in the library.
        """
        if draft is None or fields:
            supplied = draft.model_dump(exclude_unset=True) if draft is not None else {}
            supplied.update(fields)
            try:
                draft = BookDraft.model_validate(supplied)
            except PydanticValidationError as e:
                raise ValidationError(f"Invalid book fields: {e}") from e

        now = utcnow()
        book = Book(
            id=new_id(),
            title=draft.title or "Untitled",
            author=draft.author or "Unknown Author",
            description=draft.description or "",
            summary=draft.summary or "",
            cover_image=draft.cover_image,
            pdf_url=draft.pdf_url,
            audio_url=draft.audio_url,
            languages=list(draft.languages) if draft.languages is not None else ["en"],
            translations=dict(draft.translations) if draft.translations is not None else {},
            price=draft.price if draft.price is not None else 0.0,
            is_purchased=True,
            is_in_library=True,
            created_at=now,
            updated_at=now,
            writer_id=draft.writer_id,
        )

        async with self._lock:
            books = await self._load_or_seed()
            books.append(book)
            await self._write_books(books)

        logger.info(f"Added book {book.id} ({book.title!r}) to personal library")
        return book

    async def submit_writer_book(self, draft: BookDraft, writer_id: str) -> Book:
        """Publish a book from the writer dashboard. Title and summary are required."""
        if _blank(draft.title) or _blank(draft.summary):
            raise ValidationError("Please fill in at least the title and summary")
        if _blank(writer_id):
            raise ValidationError("Writer id must not be empty")
        return await self.add_book_to_personal_library(
            draft.model_copy(update={"writer_id": writer_id})
        )

    async def purchase_book(self, book_id: str) -> bool:
        """
        Mark a book purchased and shelved. Returns False for an unknown id.

        Both flags are written in a single save, and buying a book twice is a
        successful no-op.
        """
        async with self._lock:
            books = await self._load_or_seed()
            book = _find(books, book_id)
            if book is None:
                logger.info(f"Purchase of unknown book {book_id} ignored")
                return False
            if book.is_purchased and book.is_in_library:
                return True

            book.is_purchased = True
            book.is_in_library = True
            book.updated_at = utcnow()
            await self._write_books(books)

        logger.info(f"Purchased book {book_id}")
        return True

    async def add_note(
        self,
        book_id: str,
        content: str,
        page: Optional[int] = None,
        position: Optional[str] = None,
    ) -> Note:
        if _blank(content):
            raise ValidationError("Note content must not be empty")

        async with self._lock:
            books = await self._load_or_seed()
            book = _find(books, book_id)
            if book is None:
                raise BookNotFound(book_id)

            note = Note(id=new_id(), book_id=book_id, content=content, page=page, position=position)
            book.notes.append(note)
            book.updated_at = note.created_at
            await self._write_books(books)

        logger.debug(f"Added note {note.id} to book {book_id}")
        return note

    async def add_highlight(
        self,
        book_id: str,
        text: str,
        color: str,
        page: Optional[int] = None,
        position: Optional[str] = None,
    ) -> Highlight:
        if _blank(text):
            raise ValidationError("Highlighted text must not be empty")
        if _blank(color):
            raise ValidationError("Highlight color must not be empty")

        async with self._lock:
            books = await self._load_or_seed()
            book = _find(books, book_id)
            if book is None:
                raise BookNotFound(book_id)

            highlight = Highlight(
                id=new_id(), book_id=book_id, text=text, color=color, page=page, position=position
            )
            book.highlights.append(highlight)
            book.updated_at = highlight.created_at
            await self._write_books(books)

        logger.debug(f"Added highlight {highlight.id} to book {book_id}")
        return highlight

    async def get_personal_library(self) -> List[Book]:
        return [b for b in await self.get_books() if b.is_in_library]

    async def get_purchased_books(self) -> List[Book]:
        return [b for b in await self.get_books() if b.is_purchased]

    async def get_writer_books(self, writer_id: str) -> List[Book]:
        return [b for b in await self.get_books() if b.writer_id == writer_id]

    def get_available_languages(self) -> List[Language]:
        return [lang.model_copy() for lang in LANGUAGES]

    # ── user ─────────────────────────────────────────────────────────

    async def _load_user(self) -> User:
        # Caller must hold self._lock
        raw = await self._get(USER_KEY)
        if raw is None:
            user = default_user()
            logger.info(f"Creating default user {user.id}")
            await self._set(USER_KEY, user.model_dump_json(by_alias=True))
        else:
            try:
                user = User.model_validate_json(raw)
            except PydanticValidationError as e:
                raise StorageUnavailable(f"Stored user could not be decoded: {e}") from e

        # Book flags are the source of truth for the user's shelves
        try:
            books = await self._load_or_seed()
        except StorageError as e:
            logger.warning(f"Keeping stored shelves for user {user.id}, books unavailable: {e}")
            return user
        purchased = [b.id for b in books if b.is_purchased]
        shelved = [b.id for b in books if b.is_in_library]
        if user.purchased_books != purchased or user.personal_library != shelved:
            user.purchased_books = purchased
            user.personal_library = shelved
            await self._set(USER_KEY, user.model_dump_json(by_alias=True))
        return user

    async def get_current_user(self) -> Optional[User]:
        try:
            async with self._lock:
                return await self._load_user()
        except StorageError as e:
            logger.warning(f"Error getting current user: {e}")
            return None

    async def update_user_type(self, user_type: str):
        if user_type not in USER_TYPES:
            raise ValidationError(f"User type must be one of {', '.join(USER_TYPES)}, got {user_type!r}")

        async with self._lock:
            user = await self._load_user()
            if user.type == user_type:
                return
            user.type = user_type
            await self._set(USER_KEY, user.model_dump_json(by_alias=True))

        logger.info(f"Switched user {user.id} to {user_type}")


def _find(books: List[Book], book_id: str) -> Optional[Book]:
    return next((b for b in books if b.id == book_id), None)
