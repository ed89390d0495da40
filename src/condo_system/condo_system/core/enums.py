from __future__ import annotations

from enum import Enum


class Weekday(str, Enum):
    """Dias da semana aceitos em configurações de reserva (nome em inglês, minúsculo)."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_date(cls, value) -> "Weekday":
        return list(cls)[value.weekday()]


class UnitType(str, Enum):
    APARTMENT = "apartment"
    HOUSE = "house"
    COMMERCIAL = "commercial"
    OTHER = "other"


class UnitStatus(str, Enum):
    OCCUPIED = "occupied"
    VACANT = "vacant"
    MAINTENANCE = "maintenance"


class PersonStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"


class SpaceType(str, Enum):
    STORAGE = "storage"
    BOX = "box"
    CELLAR = "cellar"
    ATTIC = "attic"
    GAS_DEPOT = "gas_depot"
    TRASH_DEPOT = "trash_depot"
    GYM = "gym"
    PARTY_HALL = "party_hall"
    MEETING_ROOM = "meeting_room"
    LAUNDRY = "laundry"
    OTHER = "other"


class SpaceStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    RESERVED = "reserved"
    MAINTENANCE = "maintenance"


class ReservationStatus(str, Enum):
    """Ciclo de vida de uma reserva de espaço comum."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    REJECTED = "rejected"


# Only these occupy a time slot on the space.
BLOCKING_RESERVATION_STATUSES = frozenset({ReservationStatus.PENDING, ReservationStatus.CONFIRMED})


class ReservationPaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    PARTIAL = "partial"
    REFUNDED = "refunded"


class MonthlyFeeStatus(str, Enum):
    DRAFT = "draft"
    ISSUED = "issued"
    CLOSED = "closed"
    CANCELLED = "cancelled"


class BillingStatus(str, Enum):
    """Situação de uma cobrança (boleto) de unidade."""

    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    PARTIALLY_PAID = "partially_paid"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    BANK_SLIP = "bank_slip"
    TRANSFER = "transfer"
    PIX = "pix"
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    CASH = "cash"
    OTHER = "other"


class PaymentSource(str, Enum):
    MANUAL = "manual"
    BANK_FILE = "bank_file"
    API = "api"


class AnnouncementStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class AnnouncementPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class AnnouncementTarget(str, Enum):
    ALL = "all"
    BLOCK = "block"
    UNIT = "unit"
    SPECIFIC = "specific"


class IncidentType(str, Enum):
    MAINTENANCE = "manutencao"
    SECURITY = "seguranca"
    NOISE = "ruido"
    CLEANING = "limpeza"
    NEIGHBORHOOD = "vizinhanca"
    OTHER = "outros"


class IncidentPriority(str, Enum):
    LOW = "baixa"
    MEDIUM = "media"
    HIGH = "alta"
    URGENT = "urgente"


class IncidentStatus(str, Enum):
    OPEN = "aberta"
    IN_PROGRESS = "em_andamento"
    RESOLVED = "resolvida"
    CLOSED = "fechada"


class IncidentReporter(str, Enum):
    ADMINISTRATION = "administracao"
    RESIDENT = "morador"
    GATE = "portaria"
    STAFF = "funcionario"


class DeliveryStatus(str, Enum):
    PENDING = "pending"
    COLLECTED = "collected"


class DeliveryType(str, Enum):
    PACKAGE = "package"
    LETTER = "letter"
    DOCUMENT = "document"
    OTHER = "other"


class VisitorType(str, Enum):
    PERSONAL = "personal"
    SERVICE = "service"
    DELIVERY = "delivery"
    TAXI = "taxi"
    OTHER = "other"


class DocumentType(str, Enum):
    RG = "rg"
    CPF = "cpf"
    CNH = "cnh"
    OTHER = "other"


class VisitorStatus(str, Enum):
    """Fluxo da portaria: validação -> agendado -> entrada -> saída."""

    PENDING = "pending"
    SCHEDULED = "scheduled"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    CANCELLED = "cancelled"
    REJECTED = "rejected"


class SupplierType(str, Enum):
    COMPANY = "company"
    MEI = "mei"
    INDIVIDUAL = "individual"


class SupplierCategory(str, Enum):
    GAS_SUPPLY = "gas_supply"
    GATE_MAINTENANCE = "gate_maintenance"
    INTERCOM_MAINTENANCE = "intercom_maintenance"
    CLEANING = "cleaning"
    RECEPTION = "reception"
    ACCESS_CONTROL = "access_control"
    GARDENING = "gardening"
    ELEVATOR_MAINTENANCE = "elevator_maintenance"
    GYM_MAINTENANCE = "gym_maintenance"
    GUARANTEE_COMPANY = "guarantee_company"
    CONDOMINIUM_ADMIN = "condominium_admin"
    THIRD_PARTY_MANAGER = "third_party_manager"
    PEST_CONTROL = "pest_control"
    WATER_TANK_CLEANING = "water_tank_cleaning"
    OTHER = "other"


class SupplierStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    PENDING = "pending"
    BLOCKED = "blocked"
