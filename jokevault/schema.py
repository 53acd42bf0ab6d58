from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from .errors import DeserializationError

EXPLICIT_CATEGORY = "explicit"

STR_FIELDS = [
    "created_at",
    "icon_url",
    "id",
    "updated_at",
    "url",
    "value",
]


def validate_payload(data: Any) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    Missing fields are allowed; present fields must have the right type.
    """
    if not isinstance(data, dict):
        return [f"Expected a JSON object, got {type(data).__name__}"]

    errors: List[str] = []

    for f in STR_FIELDS:
        if f in data and data[f] is not None and not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string if provided")

    categories = data.get("categories")
    if categories is not None:
        if not isinstance(categories, list):
            errors.append("Field 'categories' must be a list of strings")
        elif not all(isinstance(c, str) for c in categories):
            errors.append("Field 'categories' must only contain strings")

    return errors


@dataclass(frozen=True)
class JokeData:
    """One joke as returned by the API's /jokes/random endpoint."""

    categories: Tuple[str, ...] = field(default_factory=tuple)
    created_at: str = ""
    icon_url: str = ""
    id: str = ""
    updated_at: str = ""
    url: str = ""
    value: str = ""

    @classmethod
    def from_payload(cls, data: Any) -> "JokeData":
        """
        Build a JokeData from a decoded JSON response.

        Raises:
            DeserializationError: If the payload is not a usable joke object
        """
        errors = validate_payload(data)
        if errors:
            raise DeserializationError(f"Could not deserialize json: {'; '.join(errors)}")

        values = {f: data.get(f) or "" for f in STR_FIELDS}
        return cls(categories=tuple(data.get("categories") or ()), **values)

    @property
    def primary_category(self) -> Optional[str]:
        return self.categories[0] if self.categories else None

    @property
    def is_explicit(self) -> bool:
        return self.primary_category == EXPLICIT_CATEGORY
