from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local, to_date
from ..common.validators import (
    merge_payload,
    optional_id,
    optional_str,
    optional_url,
    require_id,
    require_max_length,
    require_non_empty,
    to_bool,
    to_decimal,
)
from ..core.exceptions import NotFoundError
from .post_model import SupplierPost
from .post_repository import SupplierPostRepository
from .repository import SupplierRepository

logger = logging.getLogger(__name__)


class SupplierPostService:
    def __init__(
        self,
        posts: SupplierPostRepository,
        suppliers: SupplierRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._posts = posts
        self._suppliers = suppliers
        self._clock = clock

    def _clean(self, payload: dict) -> dict:
        supplier_id = require_id(payload.get("supplier_id"), "supplier_id")
        if not self._suppliers.get(supplier_id=supplier_id):
            raise NotFoundError("Supplier not found")

        def short(name: str, max_len: int = 255) -> Optional[str]:
            return require_max_length(optional_str(payload.get(name)), name, max_len)

        return {
            "supplier_id": supplier_id,
            "title": require_max_length(require_non_empty(payload.get("title"), "title"), "title", 255),
            "description": require_non_empty(payload.get("description"), "description"),
            "services_offered": optional_str(payload.get("services_offered")),
            "image_path": short("image_path"),
            "price": to_decimal(payload.get("price"), "price"),
            "contact_info": short("contact_info"),
            "instagram": short("instagram"),
            "facebook": short("facebook"),
            "whatsapp": short("whatsapp", 20),
            "website": require_max_length(optional_url(payload.get("website"), "website"), "website", 255),
            "catalog_url": require_max_length(
                optional_url(payload.get("catalog_url"), "catalog_url"), "catalog_url", 255
            ),
            "is_active": to_bool(payload.get("is_active"), default=True),
            "expires_at": to_date(payload.get("expires_at"), "expires_at", required=False),
        }

    def today(self) -> date:
        return self._clock().date()

    def get(self, post_id: int) -> SupplierPost:
        p = self._posts.get(post_id=require_id(post_id, "post_id"))
        if not p:
            raise NotFoundError("Supplier post not found")
        return p

    def list(
        self,
        *,
        supplier_id=None,
        condominium_id=None,
        search: Optional[str] = None,
        active_only: bool = False,
        limit: int = 200,
        offset: int = 0,
    ) -> Sequence[SupplierPost]:
        return self._posts.list(
            supplier_id=optional_id(supplier_id, "supplier_id"),
            condominium_id=optional_id(condominium_id, "condominium_id"),
            search=optional_str(search),
            visible_on=self.today() if active_only else None,
            limit=limit,
            offset=offset,
        )

    def create(self, payload: dict) -> SupplierPost:
        data = self._clean(payload)
        new_id = self._posts.create(data=data)
        logger.info("Supplier post %s published by supplier %s", new_id, data["supplier_id"])
        return self.get(new_id)

    def update(self, post_id: int, payload: dict) -> SupplierPost:
        existing = self.get(post_id)
        data = self._clean(merge_payload(payload, existing))
        self._posts.update(post_id=existing.id, data=data)
        return self.get(existing.id)

    def delete(self, post_id: int) -> None:
        existing = self.get(post_id)
        self._posts.delete(post_id=existing.id)
