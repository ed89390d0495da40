from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .announcements.mysql_announcement_repository import MySQLAnnouncementRepository
from .announcements.repository import AnnouncementRepository
from .announcements.service import AnnouncementService
from .billing.mysql_monthly_fee_repository import MySQLMonthlyFeeRepository
from .billing.mysql_payment_repository import MySQLPaymentRepository
from .billing.mysql_unit_billing_repository import MySQLUnitBillingRepository
from .billing.repository import MonthlyFeeRepository, PaymentRepository, UnitBillingRepository
from .billing.service import MonthlyFeeService, PaymentService, UnitBillingService
from .database.connection import DBConfig, DatabaseConnection
from .gate.mysql_delivery_repository import MySQLDeliveryRepository
from .gate.mysql_visitor_repository import MySQLVisitorRepository
from .gate.repository import DeliveryRepository, VisitorRepository
from .gate.service import DeliveryService, VisitorService
from .incidents.mysql_incident_repository import MySQLIncidentRepository
from .incidents.repository import IncidentRepository
from .incidents.service import IncidentService
from .reservations.config_service import ReservationConfigService
from .reservations.mysql_config_repository import MySQLReservationConfigRepository
from .reservations.mysql_reservation_repository import MySQLReservationRepository
from .reservations.repository import ReservationConfigRepository, ReservationRepository
from .reservations.service import ReservationService
from .residents.mysql_resident_repository import MySQLResidentRepository
from .residents.repository import ResidentRepository
from .residents.service import ResidentService
from .spaces.mysql_space_repository import MySQLSpaceRepository
from .spaces.repository import SpaceRepository
from .spaces.service import SpaceService
from .structure.mysql_block_repository import MySQLBlockRepository
from .structure.mysql_condominium_repository import MySQLCondominiumRepository
from .structure.mysql_unit_repository import MySQLUnitRepository
from .structure.repository import BlockRepository, CondominiumRepository, UnitRepository
from .structure.service import BlockService, CondominiumService, UnitService
from .suppliers.mysql_post_repository import MySQLSupplierPostRepository
from .suppliers.mysql_supplier_repository import MySQLSupplierRepository
from .suppliers.post_repository import SupplierPostRepository
from .suppliers.post_service import SupplierPostService
from .suppliers.repository import SupplierRepository
from .suppliers.service import SupplierService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    condominiums_repo: CondominiumRepository
    blocks_repo: BlockRepository
    units_repo: UnitRepository
    spaces_repo: SpaceRepository
    reservation_configs_repo: ReservationConfigRepository
    reservations_repo: ReservationRepository
    residents_repo: ResidentRepository
    monthly_fees_repo: MonthlyFeeRepository
    unit_billings_repo: UnitBillingRepository
    payments_repo: PaymentRepository
    announcements_repo: AnnouncementRepository
    incidents_repo: IncidentRepository
    deliveries_repo: DeliveryRepository
    visitors_repo: VisitorRepository
    suppliers_repo: SupplierRepository
    supplier_posts_repo: SupplierPostRepository

    condominium_service: CondominiumService
    block_service: BlockService
    unit_service: UnitService
    space_service: SpaceService
    reservation_config_service: ReservationConfigService
    reservation_service: ReservationService
    resident_service: ResidentService
    monthly_fee_service: MonthlyFeeService
    unit_billing_service: UnitBillingService
    payment_service: PaymentService
    announcement_service: AnnouncementService
    incident_service: IncidentService
    delivery_service: DeliveryService
    visitor_service: VisitorService
    supplier_service: SupplierService
    supplier_post_service: SupplierPostService


def wire_container(
    *,
    conn: Optional[DatabaseConnection],
    condominiums_repo: CondominiumRepository,
    blocks_repo: BlockRepository,
    units_repo: UnitRepository,
    spaces_repo: SpaceRepository,
    reservation_configs_repo: ReservationConfigRepository,
    reservations_repo: ReservationRepository,
    residents_repo: ResidentRepository,
    monthly_fees_repo: MonthlyFeeRepository,
    unit_billings_repo: UnitBillingRepository,
    payments_repo: PaymentRepository,
    announcements_repo: AnnouncementRepository,
    incidents_repo: IncidentRepository,
    deliveries_repo: DeliveryRepository,
    visitors_repo: VisitorRepository,
    suppliers_repo: SupplierRepository,
    supplier_posts_repo: SupplierPostRepository,
    clock=None,
) -> Container:
    """Build every service on top of the given repositories."""
    timed = {"clock": clock} if clock is not None else {}

    return Container(
        conn=conn,
        condominiums_repo=condominiums_repo,
        blocks_repo=blocks_repo,
        units_repo=units_repo,
        spaces_repo=spaces_repo,
        reservation_configs_repo=reservation_configs_repo,
        reservations_repo=reservations_repo,
        residents_repo=residents_repo,
        monthly_fees_repo=monthly_fees_repo,
        unit_billings_repo=unit_billings_repo,
        payments_repo=payments_repo,
        announcements_repo=announcements_repo,
        incidents_repo=incidents_repo,
        deliveries_repo=deliveries_repo,
        visitors_repo=visitors_repo,
        suppliers_repo=suppliers_repo,
        supplier_posts_repo=supplier_posts_repo,
        condominium_service=CondominiumService(condominiums_repo, blocks_repo, units_repo),
        block_service=BlockService(blocks_repo, condominiums_repo, units_repo),
        unit_service=UnitService(units_repo, condominiums_repo, blocks_repo),
        space_service=SpaceService(spaces_repo, condominiums_repo, units_repo),
        reservation_config_service=ReservationConfigService(reservation_configs_repo, spaces_repo),
        reservation_service=ReservationService(
            reservations_repo, reservation_configs_repo, spaces_repo, units_repo, **timed
        ),
        resident_service=ResidentService(residents_repo, condominiums_repo, units_repo),
        monthly_fee_service=MonthlyFeeService(monthly_fees_repo, unit_billings_repo, condominiums_repo, units_repo),
        unit_billing_service=UnitBillingService(unit_billings_repo, monthly_fees_repo, units_repo, **timed),
        payment_service=PaymentService(payments_repo, unit_billings_repo, **timed),
        announcement_service=AnnouncementService(announcements_repo, condominiums_repo, **timed),
        incident_service=IncidentService(incidents_repo, condominiums_repo, blocks_repo, units_repo, **timed),
        delivery_service=DeliveryService(deliveries_repo, units_repo, **timed),
        visitor_service=VisitorService(visitors_repo, condominiums_repo, units_repo, **timed),
        supplier_service=SupplierService(suppliers_repo, condominiums_repo, **timed),
        supplier_post_service=SupplierPostService(supplier_posts_repo, suppliers_repo, **timed),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_container(
        conn=conn,
        condominiums_repo=MySQLCondominiumRepository(conn),
        blocks_repo=MySQLBlockRepository(conn),
        units_repo=MySQLUnitRepository(conn),
        spaces_repo=MySQLSpaceRepository(conn),
        reservation_configs_repo=MySQLReservationConfigRepository(conn),
        reservations_repo=MySQLReservationRepository(conn),
        residents_repo=MySQLResidentRepository(conn),
        monthly_fees_repo=MySQLMonthlyFeeRepository(conn),
        unit_billings_repo=MySQLUnitBillingRepository(conn),
        payments_repo=MySQLPaymentRepository(conn),
        announcements_repo=MySQLAnnouncementRepository(conn),
        incidents_repo=MySQLIncidentRepository(conn),
        deliveries_repo=MySQLDeliveryRepository(conn),
        visitors_repo=MySQLVisitorRepository(conn),
        suppliers_repo=MySQLSupplierRepository(conn),
        supplier_posts_repo=MySQLSupplierPostRepository(conn),
    )
