"""Errors raised by the favourites service."""


class FavoritesError(Exception):
    default_message = "favorites error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.default_message)


class InvalidInputError(FavoritesError):
    default_message = "invalid input"


class NotFoundError(FavoritesError):
    default_message = "favorite not found"


class AlreadyExistsError(FavoritesError):
    default_message = "favorite already exists"
