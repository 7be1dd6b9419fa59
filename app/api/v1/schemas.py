"""
Request and response bodies of the inventory API.
"""

from datetime import date

from pydantic import AliasChoices, BaseModel, Field


class BookIn(BaseModel):
    """
    Request body for creating or editing a book.

    Values are accepted as typed by the user; field formats are checked by
    the domain validator so the client gets the same reasons everywhere.
    """
    title: str = Field(default="", description="Book title")
    author: str = Field(default="", description="Author name")
    genre: str = Field(default="", description="Genre")
    publication_date: str = Field(
        default="",
        validation_alias=AliasChoices("publication_date", "publish_date"),
        description="Publication date, YYYY-MM-DD",
    )
    isbn: str = Field(default="", description="ISBN-10 or ISBN-13")
    stock: int | str = Field(default="", description="Copies in stock (non-negative integer)")


class Book(BaseModel):
    """
    API representation of a Book entity.

    Maps from the domain Book entity for API responses.
    """

    id: int = Field(description="Identifier assigned by the inventory")
    title: str = Field(description="Book title")
    author: str = Field(description="Author name")
    genre: str = Field(description="Genre")
    publication_date: date = Field(description="Publication date")
    isbn: str = Field(description="ISBN-10 or ISBN-13")
    stock: int = Field(ge=0, description="Copies in stock")


class HealthResponse(BaseModel):
    status: str
    books: int
