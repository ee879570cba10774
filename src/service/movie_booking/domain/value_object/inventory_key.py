import attrs

from src.platform.exception.exceptions import ValidationError
from src.service.movie_booking.domain.enum.rule import InventoryRule


def normalize_name(value: str) -> str:
    return value.strip().casefold()


@attrs.define(frozen=True)
class InventoryKey:
    """
    Case-insensitive identity of an Inventory: (movie, theatre).

    Display names are kept on the entities; the key only carries the
    normalized form used for lookup, locking and uniqueness.
    """

    movie: str
    theatre: str

    @classmethod
    def of(cls, *, movie_name: str, theatre_name: str) -> 'InventoryKey':
        if not movie_name or not movie_name.strip():
            raise ValidationError('Movie name must be provided', rule=InventoryRule.NAME_REQUIRED)
        if not theatre_name or not theatre_name.strip():
            raise ValidationError(
                'Theatre name must be provided', rule=InventoryRule.NAME_REQUIRED
            )
        return cls(movie=normalize_name(movie_name), theatre=normalize_name(theatre_name))

    @property
    def lock_name(self) -> str:
        return f'inventory:{self.movie}:{self.theatre}'

    def __str__(self) -> str:
        return f'{self.movie}@{self.theatre}'
