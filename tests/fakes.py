from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

from src.condo_system.condo_system.announcements.model import Announcement
from src.condo_system.condo_system.billing.model import MonthlyFee, Payment, UnitBilling
from src.condo_system.condo_system.container import Container, wire_container
from src.condo_system.condo_system.core.enums import BillingStatus
from src.condo_system.condo_system.gate.model import Delivery, Visitor
from src.condo_system.condo_system.incidents.model import Incident
from src.condo_system.condo_system.reservations.model import Reservation, ReservationConfig
from src.condo_system.condo_system.residents.model import Resident
from src.condo_system.condo_system.spaces.model import Space
from src.condo_system.condo_system.structure.model import Block, Condominium, Unit
from src.condo_system.condo_system.suppliers.model import Supplier
from src.condo_system.condo_system.suppliers.post_model import SupplierPost


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def _page(items, limit: int, offset: int):
    return list(items)[offset : offset + limit]


def _contains(needle: Optional[str], *values) -> bool:
    if not needle:
        return True
    n = needle.lower()
    return any(v and n in str(v).lower() for v in values)


class InMemoryTable:
    """Dict-backed store keyed by id; subclasses add the query methods."""

    model = None

    def __init__(self):
        self.rows: dict[int, object] = {}
        self._id = 0

    def create(self, *, data: dict) -> int:
        self._id += 1
        self.rows[self._id] = self.model(id=self._id, **data)
        return self._id

    def get(self, **key):
        (row_id,) = key.values()
        return self.rows.get(int(row_id))

    def update(self, *, data: dict, **key) -> bool:
        (row_id,) = key.values()
        if row_id not in self.rows:
            return False
        self.rows[row_id] = replace(self.rows[row_id], **data)
        return True

    def delete(self, **key) -> bool:
        (row_id,) = key.values()
        return self.rows.pop(row_id, None) is not None


class InMemoryCondominiums(InMemoryTable):
    model = Condominium

    def list(self, *, active_only=False, search=None, limit=200, offset=0):
        items = [
            c
            for c in sorted(self.rows.values(), key=lambda c: c.name)
            if (not active_only or c.active) and _contains(search, c.name, c.city)
        ]
        return _page(items, limit, offset)


class InMemoryBlocks(InMemoryTable):
    model = Block

    def list_by_condominium(self, *, condominium_id, limit=200, offset=0):
        items = sorted((b for b in self.rows.values() if b.condominium_id == condominium_id), key=lambda b: b.name)
        return _page(items, limit, offset)


class InMemoryUnits(InMemoryTable):
    model = Unit

    def find_by_number(self, *, condominium_id, block_id, number):
        for u in self.rows.values():
            if (u.condominium_id, u.block_id, u.number) == (condominium_id, block_id, number):
                return u
        return None

    def list_by_condominium(
        self, *, condominium_id, block_id=None, status=None, unit_type=None, active_only=False, limit=1000, offset=0
    ):
        items = [
            u
            for u in self.rows.values()
            if u.condominium_id == condominium_id
            and (block_id is None or u.block_id == block_id)
            and (status is None or u.status == status)
            and (unit_type is None or u.type == unit_type)
            and (not active_only or u.active)
        ]
        items.sort(key=lambda u: (u.block_id or 0, u.number))
        return _page(items, limit, offset)


class InMemorySpaces(InMemoryTable):
    model = Space

    def find_by_number(self, *, condominium_id, number):
        for s in self.rows.values():
            if s.condominium_id == condominium_id and s.number == number:
                return s
        return None

    def list_by_condominium(
        self, *, condominium_id, space_type=None, status=None, reservable=None, limit=200, offset=0
    ):
        items = [
            s
            for s in self.rows.values()
            if s.condominium_id == condominium_id
            and (space_type is None or s.space_type == space_type)
            and (status is None or s.status == status)
            and (reservable is None or s.reservable == reservable)
        ]
        return _page(sorted(items, key=lambda s: s.number), limit, offset)


class InMemoryReservationConfigs(InMemoryTable):
    model = ReservationConfig

    def get_active_for_space(self, *, space_id):
        for c in self.rows.values():
            if c.space_id == space_id and c.active:
                return c
        return None

    def list_by_condominium(self, *, condominium_id, active_only=False):
        return [
            c for c in self.rows.values() if c.condominium_id == condominium_id and (not active_only or c.active)
        ]


class InMemoryReservations(InMemoryTable):
    model = Reservation

    def list_for_space_date(self, *, space_id, reservation_date, statuses):
        statuses = set(statuses)
        items = [
            r
            for r in self.rows.values()
            if r.space_id == space_id and r.reservation_date == reservation_date and r.status in statuses
        ]
        return sorted(items, key=lambda r: r.start_time)

    def list(
        self,
        *,
        condominium_id,
        status=None,
        space_id=None,
        unit_id=None,
        start_date=None,
        end_date=None,
        search=None,
        limit=200,
        offset=0,
    ):
        items = [
            r
            for r in self.rows.values()
            if r.condominium_id == condominium_id
            and (status is None or r.status == status)
            and (space_id is None or r.space_id == space_id)
            and (unit_id is None or r.unit_id == unit_id)
            and (start_date is None or r.reservation_date >= start_date)
            and (end_date is None or r.reservation_date <= end_date)
            and _contains(search, r.contact_name, r.event_type)
        ]
        items.sort(key=lambda r: (r.reservation_date, r.start_time), reverse=True)
        return _page(items, limit, offset)

    def count(self, *, condominium_id, status=None, date_from=None, date_to=None):
        return sum(
            1
            for r in self.rows.values()
            if r.condominium_id == condominium_id
            and (status is None or r.status == status)
            and (date_from is None or r.reservation_date >= date_from)
            and (date_to is None or r.reservation_date < date_to)
        )


class InMemoryResidents(InMemoryTable):
    model = Resident

    def find_active_for_unit(self, *, unit_id):
        for r in self.rows.values():
            if r.unit_id == unit_id and r.active:
                return r
        return None

    def list_by_condominium(self, *, condominium_id, search=None, with_tenant=None, limit=200, offset=0):
        items = [
            r
            for r in self.rows.values()
            if r.condominium_id == condominium_id
            and (with_tenant is None or r.has_tenant == with_tenant)
            and _contains(search, r.owner_name, r.tenant_name, r.owner_email)
        ]
        return _page(items, limit, offset)


class InMemoryMonthlyFees(InMemoryTable):
    model = MonthlyFee

    def list(self, *, condominium_id=None, status=None, reference_month=None, year=None, limit=200, offset=0):
        items = [
            f
            for f in self.rows.values()
            if (condominium_id is None or f.condominium_id == condominium_id)
            and (status is None or f.status == status)
            and (reference_month is None or f.reference_month == reference_month)
            and (year is None or f.reference_month.year == year)
        ]
        items.sort(key=lambda f: f.reference_month, reverse=True)
        return _page(items, limit, offset)


class InMemoryUnitBillings(InMemoryTable):
    model = UnitBilling

    def __init__(self, units: InMemoryUnits):
        super().__init__()
        self._units = units

    def create_many(self, *, rows):
        return [self.create(data=r) for r in rows]

    def billed_unit_ids(self, *, monthly_fee_id, unit_ids):
        wanted = set(unit_ids)
        return {b.unit_id for b in self.rows.values() if b.monthly_fee_id == monthly_fee_id and b.unit_id in wanted}

    def _condominium_of(self, billing: UnitBilling) -> Optional[int]:
        unit = self._units.get(unit_id=billing.unit_id)
        return unit.condominium_id if unit else None

    def list(
        self,
        *,
        monthly_fee_id=None,
        unit_id=None,
        status=None,
        condominium_id=None,
        overdue_on=None,
        limit=200,
        offset=0,
    ):
        items = [
            b
            for b in self.rows.values()
            if (monthly_fee_id is None or b.monthly_fee_id == monthly_fee_id)
            and (unit_id is None or b.unit_id == unit_id)
            and (status is None or b.status == status)
            and (condominium_id is None or self._condominium_of(b) == condominium_id)
            and (
                overdue_on is None
                or (b.status not in (BillingStatus.PAID, BillingStatus.CANCELLED) and b.due_date < overdue_on)
            )
        ]
        return _page(items, limit, offset)


class InMemoryPayments(InMemoryTable):
    model = Payment

    def __init__(self, billings: InMemoryUnitBillings):
        super().__init__()
        self._billings = billings

    def list(
        self,
        *,
        unit_billing_id=None,
        condominium_id=None,
        payment_method=None,
        start_date=None,
        end_date=None,
        limit=200,
        offset=0,
    ):
        def condominium_of(p: Payment):
            billing = self._billings.get(unit_billing_id=p.unit_billing_id)
            return self._billings._condominium_of(billing) if billing else None

        items = [
            p
            for p in self.rows.values()
            if (unit_billing_id is None or p.unit_billing_id == unit_billing_id)
            and (condominium_id is None or condominium_of(p) == condominium_id)
            and (payment_method is None or p.payment_method == payment_method)
            and (start_date is None or p.payment_date >= start_date)
            and (end_date is None or p.payment_date <= end_date)
        ]
        items.sort(key=lambda p: p.payment_date, reverse=True)
        return _page(items, limit, offset)


class InMemoryAnnouncements(InMemoryTable):
    model = Announcement

    def list(
        self, *, condominium_id, status=None, priority=None, search=None, current_at=None, limit=200, offset=0
    ):
        items = [
            a
            for a in self.rows.values()
            if a.condominium_id == condominium_id
            and (status is None or a.status == status)
            and (priority is None or a.priority == priority)
            and (current_at is None or a.is_current(current_at))
            and _contains(search, a.title, a.content)
        ]
        return _page(items, limit, offset)


class InMemoryIncidents(InMemoryTable):
    model = Incident

    def list(
        self,
        *,
        condominium_id,
        status=None,
        incident_type=None,
        priority=None,
        block_id=None,
        search=None,
        limit=200,
        offset=0,
    ):
        items = [
            i
            for i in self.rows.values()
            if i.condominium_id == condominium_id
            and (status is None or i.status == status)
            and (incident_type is None or i.type == incident_type)
            and (priority is None or i.priority == priority)
            and (block_id is None or i.block_id == block_id)
            and _contains(search, i.title, i.description, i.location)
        ]
        return _page(items, limit, offset)


class InMemoryDeliveries(InMemoryTable):
    model = Delivery

    def __init__(self, units: InMemoryUnits):
        super().__init__()
        self._units = units

    def find_by_code(self, *, code):
        for d in self.rows.values():
            if d.delivery_code == code:
                return d
        return None

    def list(
        self,
        *,
        condominium_id=None,
        unit_id=None,
        status=None,
        delivery_type=None,
        search=None,
        limit=200,
        offset=0,
    ):
        def condominium_of(d: Delivery):
            unit = self._units.get(unit_id=d.unit_id)
            return unit.condominium_id if unit else None

        items = [
            d
            for d in self.rows.values()
            if (condominium_id is None or condominium_of(d) == condominium_id)
            and (unit_id is None or d.unit_id == unit_id)
            and (status is None or d.status == status)
            and (delivery_type is None or d.type == delivery_type)
            and _contains(search, d.recipient_name, d.sender, d.delivery_code)
        ]
        return _page(items, limit, offset)


class InMemoryVisitors(InMemoryTable):
    model = Visitor

    def list(
        self,
        *,
        condominium_id,
        status=None,
        visitor_type=None,
        unit_id=None,
        scheduled_date=None,
        search=None,
        limit=200,
        offset=0,
    ):
        items = [
            v
            for v in self.rows.values()
            if v.condominium_id == condominium_id
            and (status is None or v.status == status)
            and (visitor_type is None or v.visitor_type == visitor_type)
            and (unit_id is None or v.unit_id == unit_id)
            and (scheduled_date is None or v.scheduled_date == scheduled_date)
            and _contains(search, v.name, v.document_number, v.vehicle_plate)
        ]
        return _page(items, limit, offset)


class InMemorySuppliers(InMemoryTable):
    model = Supplier

    def find_by_document(self, *, cnpj=None, cpf=None):
        for s in self.rows.values():
            if (cnpj and s.cnpj == cnpj) or (cpf and s.cpf == cpf):
                return s
        return None

    def list(self, *, condominium_id, category=None, status=None, search=None, limit=200, offset=0):
        items = [
            s
            for s in self.rows.values()
            if s.condominium_id == condominium_id
            and (category is None or s.category == category)
            and (status is None or s.status == status)
            and _contains(search, s.company_name, s.trade_name, s.contact_name)
        ]
        return _page(items, limit, offset)


class InMemorySupplierPosts(InMemoryTable):
    model = SupplierPost

    def __init__(self, suppliers: InMemorySuppliers):
        super().__init__()
        self._suppliers = suppliers

    def list(self, *, supplier_id=None, condominium_id=None, search=None, visible_on=None, limit=200, offset=0):
        items = [
            p
            for p in sorted(self.rows.values(), key=lambda p: p.id, reverse=True)
            if (supplier_id is None or p.supplier_id == supplier_id)
            and (condominium_id is None or self._suppliers.get(supplier_id=p.supplier_id).condominium_id == condominium_id)
            and (visible_on is None or p.is_visible(visible_on))
            and _contains(search, p.title, p.description)
        ]
        return _page(items, limit, offset)


def make_container(clock: Optional[FixedClock] = None) -> Container:
    units = InMemoryUnits()
    billings = InMemoryUnitBillings(units)
    suppliers = InMemorySuppliers()
    return wire_container(
        conn=None,
        condominiums_repo=InMemoryCondominiums(),
        blocks_repo=InMemoryBlocks(),
        units_repo=units,
        spaces_repo=InMemorySpaces(),
        reservation_configs_repo=InMemoryReservationConfigs(),
        reservations_repo=InMemoryReservations(),
        residents_repo=InMemoryResidents(),
        monthly_fees_repo=InMemoryMonthlyFees(),
        unit_billings_repo=billings,
        payments_repo=InMemoryPayments(billings),
        announcements_repo=InMemoryAnnouncements(),
        incidents_repo=InMemoryIncidents(),
        deliveries_repo=InMemoryDeliveries(units),
        visitors_repo=InMemoryVisitors(),
        suppliers_repo=suppliers,
        supplier_posts_repo=InMemorySupplierPosts(suppliers),
        clock=clock,
    )
