from pydantic import Field

from ..models import Book, CamelModel, UtcDatetime


class FavoriteItem(CamelModel):
    """A favourite book.  ``id`` equals ``book.id``."""

    id: str
    book: Book
    added_at: UtcDatetime

    def sort_key(self):
        return (self.added_at, self.id)


class AddFavoriteRequest(CamelModel):
    book: Book = Field(default_factory=Book)
