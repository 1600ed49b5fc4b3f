from dataclasses import dataclass


@dataclass(frozen=True)
class Book:
    """A book with its catalogue id, title and price."""
    id: int
    title: str
    price: float

    def __post_init__(self):
        # prices always render with a decimal point, 50 -> 50.0
        object.__setattr__(self, 'price', float(self.price))

    def __str__(self) -> str:
        return f'{self.id} {self.title} {self.price}\n'
