from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Optional

from ..core.enums import SupplierCategory, SupplierStatus, SupplierType

SUPPLIER_CATEGORY_LABELS = {
    SupplierCategory.GAS_SUPPLY: "Fornecimento de gás",
    SupplierCategory.GATE_MAINTENANCE: "Manutenção de portões",
    SupplierCategory.INTERCOM_MAINTENANCE: "Manutenção de interfones",
    SupplierCategory.CLEANING: "Zeladoria e limpeza",
    SupplierCategory.RECEPTION: "Portaria",
    SupplierCategory.ACCESS_CONTROL: "Controle de acesso",
    SupplierCategory.GARDENING: "Jardinagem",
    SupplierCategory.ELEVATOR_MAINTENANCE: "Manutenção de elevadores",
    SupplierCategory.GYM_MAINTENANCE: "Manutenção da academia",
    SupplierCategory.GUARANTEE_COMPANY: "Empresa garantidora (taxas de administração)",
    SupplierCategory.CONDOMINIUM_ADMIN: "Administradora de condomínio",
    SupplierCategory.THIRD_PARTY_MANAGER: "Síndico terceirizado",
    SupplierCategory.PEST_CONTROL: "Dedetização / desinsetização / desratização",
    SupplierCategory.WATER_TANK_CLEANING: "Limpeza de reservatórios de água",
    SupplierCategory.OTHER: "Outros",
}

SUPPLIER_TYPE_LABELS = {
    SupplierType.COMPANY: "Empresa",
    SupplierType.MEI: "MEI",
    SupplierType.INDIVIDUAL: "Pessoa Física",
}


@dataclass(frozen=True)
class Supplier:
    id: int
    condominium_id: int
    company_name: str
    contact_name: str
    trade_name: Optional[str] = None
    cnpj: Optional[str] = None
    cpf: Optional[str] = None
    supplier_type: SupplierType = SupplierType.COMPANY
    category: SupplierCategory = SupplierCategory.OTHER
    email: Optional[str] = None
    phone: Optional[str] = None
    mobile: Optional[str] = None
    address: Optional[str] = None
    number: Optional[str] = None
    district: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    services_description: Optional[str] = None
    hourly_rate: Optional[Decimal] = None
    monthly_rate: Optional[Decimal] = None
    contract_start: Optional[date] = None
    contract_end: Optional[date] = None
    status: SupplierStatus = SupplierStatus.ACTIVE
    evaluation: Optional[Decimal] = None
    emergency_contact: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def contract_expiring(self, today: date, days: int) -> bool:
        """Contract ends within the next `days` days (today included)."""
        if self.contract_end is None:
            return False
        return today <= self.contract_end <= today + timedelta(days=days)
