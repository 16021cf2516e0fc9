from __future__ import annotations

import logging

from salon_booking.application.exceptions import NotFoundError
from salon_booking.application.ports.catalog import CatalogPort
from salon_booking.domain.entities.menu import Category, Menu, MenuDraft
from salon_booking.infrastructure.salon_api.http_client import SalonApiClient, wire_id
from salon_booking.infrastructure.salon_api.payloads import parse_category, parse_list, parse_menu


class HttpCatalog(CatalogPort):
    def __init__(self, client: SalonApiClient) -> None:
        self._client = client
        self._logger = logging.getLogger(__name__)

    async def fetch_menus(self) -> list[Menu]:
        data = await self._client.get("/api/v1/menus")
        return parse_list(data, parse_menu)

    async def fetch_menus_by_category(self, category: str) -> list[Menu]:
        data = await self._client.get("/api/v1/menus", params={"category": category})
        return parse_list(data, parse_menu)

    async def fetch_menu_detail(self, menu_id: str) -> Menu:
        data = await self._client.get(f"/api/v1/menus/{menu_id}")
        if not data:
            raise NotFoundError(f"menu {menu_id} not found", error_code="MENU_NOT_FOUND")
        return parse_menu(data)

    async def fetch_categories(self) -> list[Category]:
        data = await self._client.get("/api/v1/categories")
        return parse_list(data, parse_category)

    async def create_category(self, name: str) -> Category:
        data = await self._client.post("/api/v1/admin/categories", json={"name": name})
        self._logger.info("Category created", extra={"category": name})
        return parse_category(data)

    async def create_menu(self, draft: MenuDraft) -> None:
        payload = {
            "name": draft.name,
            "description": draft.description,
            "minDuration": draft.min_duration,
            "maxDuration": draft.max_duration,
            "price": draft.price,
            "mainImage": draft.main_image,
            "detailImages": list(draft.detail_images),
            "options": [
                {
                    "name": option.name,
                    "duration": option.duration,
                    "price": option.price,
                    "description": option.description,
                }
                for option in draft.options
            ],
            "categoryIds": [wire_id(c) for c in draft.category_ids],
        }
        await self._client.post("/api/v1/menus", json=payload)
        self._logger.info("Menu created", extra={"menu_name": draft.name})
