"""Cashier model."""
from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class Cashier:
    """An employee who rings up transactions."""
    id: int
    name: str
    salary: Decimal = field(default=Decimal('0'))

    def __post_init__(self):
        salary = Decimal(str(self.salary))
        if salary < 0:
            raise ValueError('salary cannot be negative')
        object.__setattr__(self, 'salary', salary)

    def __str__(self):
        return f"Cashier: {self.name} - Identification: {self.id}"

    def to_dict(self):
        return {'id': self.id, 'name': self.name, 'salary': self.salary}
