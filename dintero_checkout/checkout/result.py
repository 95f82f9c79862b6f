"""
Résultat explicite Ok | Err pour les cas d'usage qui peuvent échouer en validation.
- Ok(value): succès, value accessible via .value / unwrap().
- Err(error): échec, l'exception portée est levée par unwrap().
"""
from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=Exception)

@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self):
        raise self.error

Result = Union[Ok[T], Err[E]]
