from __future__ import annotations

from dataclasses import dataclass, field


def _require_non_negative(**values: int) -> None:
    for name, value in values.items():
        if value < 0:
            raise ValueError(f"{name} must be non-negative, got {value}")


@dataclass(frozen=True)
class MenuOption:
    id: str
    name: str
    price: int
    additional_minutes: int
    description: str | None = None

    def __post_init__(self) -> None:
        _require_non_negative(price=self.price, additional_minutes=self.additional_minutes)


@dataclass(frozen=True)
class Menu:
    id: str
    name: str
    base_price: int
    base_duration_minutes: int
    options: tuple[MenuOption, ...] = field(default_factory=tuple)
    category: str | None = None  # e.g. "cut", "color", "perm"
    description: str | None = None
    price_note: str | None = None  # "~" when the price depends on hair length
    image_url: str | None = None

    def __post_init__(self) -> None:
        _require_non_negative(
            base_price=self.base_price,
            base_duration_minutes=self.base_duration_minutes,
        )

    def get_option(self, option_id: str) -> MenuOption | None:
        for option in self.options:
            if option.id == option_id:
                return option
        return None


@dataclass(frozen=True)
class Category:
    id: str
    name: str


@dataclass(frozen=True)
class MenuOptionDraft:
    name: str
    duration: int
    price: int
    description: str = ""


@dataclass(frozen=True)
class MenuDraft:
    """Admin input for creating a menu."""

    name: str
    description: str
    min_duration: int
    max_duration: int
    price: int
    main_image: str = ""
    detail_images: tuple[str, ...] = field(default_factory=tuple)
    options: tuple[MenuOptionDraft, ...] = field(default_factory=tuple)
    category_ids: tuple[str, ...] = field(default_factory=tuple)
