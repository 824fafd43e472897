from datetime import datetime, timezone
from typing import List, Dict, Optional, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

UserType = Literal["reader", "writer"]
SubscriptionType = Literal["monthly", "yearly"]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Record(BaseModel):
    # Persisted JSON keeps the camelCase field names of the mobile schema
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BookTranslation(Record):
    title: str = ""
    description: str = ""
    summary: str = ""
    pdf_url: Optional[str] = None
    audio_url: Optional[str] = None


class Note(Record):
    id: str
    book_id: str
    content: str
    page: Optional[int] = None
    position: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


class Highlight(Record):
    id: str
    book_id: str
    text: str
    color: str
    page: Optional[int] = None
    position: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)


class Book(Record):
    id: str
    title: str
    author: str
    description: str = ""
    summary: str = ""
    cover_image: Optional[str] = None
    pdf_url: Optional[str] = None
    audio_url: Optional[str] = None
    languages: List[str] = ["en"]
    translations: Dict[str, BookTranslation] = {}
    price: Optional[float] = None

    # Tracked separately: a book can be bought without being shelved and vice versa
    is_purchased: bool = False
    is_in_library: bool = False

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    writer_id: Optional[str] = None

    notes: List[Note] = []
    highlights: List[Highlight] = []

    @property
    def available_languages(self) -> List[str]:
        codes = list(self.languages)
        for code in self.translations:
            if code not in codes:
                codes.append(code)
        return codes

    def localized(self, code: str) -> BookTranslation:
        """
        Display fields for a language. Translations are sparse, so any field
        the translation leaves empty falls back to the base book.
        """
        tr = self.translations.get(code)
        if tr is None:
            return BookTranslation(
                title=self.title,
                description=self.description,
                summary=self.summary,
                pdf_url=self.pdf_url,
                audio_url=self.audio_url,
            )
        return BookTranslation(
            title=tr.title or self.title,
            description=tr.description or self.description,
            summary=tr.summary or self.summary,
            pdf_url=tr.pdf_url or self.pdf_url,
            audio_url=tr.audio_url or self.audio_url,
        )


class BookDraft(Record):
    """Caller-supplied fields for a new book; anything left unset gets a default."""
    title: Optional[str] = None
    author: Optional[str] = None
    description: Optional[str] = None
    summary: Optional[str] = None
    cover_image: Optional[str] = None
    pdf_url: Optional[str] = None
    audio_url: Optional[str] = None
    languages: Optional[List[str]] = None
    translations: Optional[Dict[str, BookTranslation]] = None
    price: Optional[float] = None
    writer_id: Optional[str] = None


class Subscription(Record):
    id: str
    type: SubscriptionType
    is_active: bool = False
    expires_at: Optional[datetime] = None


class User(Record):
    id: str
    email: str
    name: str
    type: UserType = "reader"
    subscription: Optional[Subscription] = None
    purchased_books: List[str] = []
    personal_library: List[str] = []


class Language(Record):
    code: str
    name: str
    native_name: str
