"""Abort-code error descriptions (error maps)."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

ERROR_MAP_EXTENSION = "errmap"
CATEGORY_MASK = 0xFF
REASON_SHIFT = 8


class ErrorDescription(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    code_name: str
    code_description: str


class ErrorContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: ErrorDescription
    reason: ErrorDescription


class ErrorMapping(BaseModel):
    """Maps abort codes to human readable categories and per-module reasons.

    An abort code packs a category in its low byte and a module specific
    reason in the remaining bits.
    """

    model_config = ConfigDict(extra="forbid")

    error_categories: dict[int, ErrorDescription] = Field(default_factory=dict)
    module_error_maps: dict[str, dict[int, ErrorDescription]] = Field(default_factory=dict)

    def add_error_category(self, category_id: int, description: ErrorDescription) -> None:
        if category_id in self.error_categories:
            raise ValueError(f"duplicate error category: {category_id}")
        self.error_categories[category_id] = description

    def add_module_error(
        self, module_id: str, abort_code: int, description: ErrorDescription
    ) -> None:
        module_map = self.module_error_maps.setdefault(module_id, {})
        if abort_code in module_map:
            raise ValueError(f"duplicate abort code {abort_code} for module {module_id}")
        module_map[abort_code] = description

    def get_explanation(self, module_id: str, abort_code: int) -> ErrorContext | None:
        category = abort_code & CATEGORY_MASK
        reason = abort_code >> REASON_SHIFT
        category_desc = self.error_categories.get(category)
        reason_desc = self.module_error_maps.get(module_id, {}).get(reason)
        if category_desc is None or reason_desc is None:
            return None
        return ErrorContext(category=category_desc, reason=reason_desc)

    def to_file(self, path: str | Path) -> Path:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2) + "\n", encoding="utf-8")
        return target

    @classmethod
    def from_file(cls, path: str | Path) -> "ErrorMapping":
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))


__all__ = [
    "ERROR_MAP_EXTENSION",
    "ErrorDescription",
    "ErrorContext",
    "ErrorMapping",
]
