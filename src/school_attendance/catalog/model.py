from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class FormEntry:
    """One form (grade level) and its ordered class names."""

    form: int
    name: str
    classes: tuple[str, ...]

    def to_dict(self) -> dict:
        return {"form": self.form, "name": self.name, "classes": list(self.classes)}


class FormCatalog:
    """Typed, read-only form -> classes mapping."""

    def __init__(self, entries: Iterable[FormEntry]):
        self._entries: Mapping[int, FormEntry] = {e.form: e for e in sorted(entries, key=lambda e: e.form)}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, form: object) -> bool:
        return form in self._entries

    def forms(self) -> Sequence[FormEntry]:
        return list(self._entries.values())

    def get(self, form: int) -> FormEntry:
        entry = self._entries.get(form)
        if entry is None:
            raise ValidationError(f"Invalid form: {form}")
        return entry

    def classes_for(self, form: int) -> tuple[str, ...]:
        return self.get(form).classes

    def validate(self, form: int, class_name: str) -> None:
        if class_name not in self.classes_for(form):
            raise ValidationError(f"Invalid class {class_name!r} for form {form}")

    def has_class(self, class_name: str) -> bool:
        return any(class_name in e.classes for e in self._entries.values())
