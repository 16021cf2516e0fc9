from __future__ import annotations

from salon_booking.application.exceptions import SelectionValidationError
from salon_booking.application.ports.catalog import CatalogPort
from salon_booking.domain.entities.menu import Category, Menu, MenuDraft


class CatalogUseCase:
    def __init__(self, catalog: CatalogPort) -> None:
        self._catalog = catalog

    async def list_menus(self, category: str | None = None) -> list[Menu]:
        if category:
            return await self._catalog.fetch_menus_by_category(category)
        return await self._catalog.fetch_menus()

    async def get_menu(self, menu_id: str) -> Menu:
        return await self._catalog.fetch_menu_detail(menu_id)

    async def list_categories(self) -> list[Category]:
        return await self._catalog.fetch_categories()


class AdminCatalogUseCase:
    def __init__(self, catalog: CatalogPort) -> None:
        self._catalog = catalog

    async def create_category(self, name: str) -> Category:
        name = name.strip()
        if not name:
            raise SelectionValidationError("category name is required")
        return await self._catalog.create_category(name)

    async def create_menu(self, draft: MenuDraft) -> None:
        validate_menu_draft(draft)
        await self._catalog.create_menu(draft)


def validate_menu_draft(draft: MenuDraft) -> None:
    if not draft.name.strip():
        raise SelectionValidationError("menu name is required")
    if draft.price < 0:
        raise SelectionValidationError("price must be non-negative")
    if draft.min_duration <= 0:
        raise SelectionValidationError("minimum duration must be positive")
    if draft.max_duration < draft.min_duration:
        raise SelectionValidationError("maximum duration must not be less than minimum duration")
    for option in draft.options:
        if not option.name.strip():
            raise SelectionValidationError("option name is required")
        if option.price < 0 or option.duration < 0:
            raise SelectionValidationError(f"option {option.name!r} has a negative price or duration")
