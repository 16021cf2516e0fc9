from __future__ import annotations

from abc import ABC, abstractmethod

from salon_booking.domain.entities.menu import Category, Menu, MenuDraft


class CatalogPort(ABC):
    @abstractmethod
    async def fetch_menus(self) -> list[Menu]:
        raise NotImplementedError

    @abstractmethod
    async def fetch_menus_by_category(self, category: str) -> list[Menu]:
        raise NotImplementedError

    @abstractmethod
    async def fetch_menu_detail(self, menu_id: str) -> Menu:
        """Get a menu with its options. Raises NotFoundError if missing."""
        raise NotImplementedError

    @abstractmethod
    async def fetch_categories(self) -> list[Category]:
        raise NotImplementedError

    @abstractmethod
    async def create_category(self, name: str) -> Category:
        raise NotImplementedError

    @abstractmethod
    async def create_menu(self, draft: MenuDraft) -> None:
        raise NotImplementedError
