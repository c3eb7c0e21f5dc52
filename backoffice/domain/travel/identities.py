"""
Passenger identities

A passenger points at one of four identity tables. Each table is loaded into
its own frozen dataclass and projected onto the common Contact shape used for
messaging.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Employee, Employer, Stakeholder, TaskHelper

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Contact:
    person_type: str
    person_id: int
    display_name: str
    email: Optional[str] = None
    phone: Optional[str] = None


@dataclass(frozen=True)
class EmployeeIdentity:
    id: int
    full_name: Optional[str]
    first_name: Optional[str]
    last_name: Optional[str]
    email: Optional[str]
    phone: Optional[str]

    def to_contact(self) -> Contact:
        name = self.full_name or " ".join(p for p in (self.first_name, self.last_name) if p)
        return Contact("EMPLOYEE", self.id, name, self.email, self.phone)


@dataclass(frozen=True)
class StakeholderIdentity:
    id: int
    first_name: str
    last_name: str
    email: Optional[str]
    phone: Optional[str]

    def to_contact(self) -> Contact:
        return Contact(
            "STAKEHOLDER", self.id, f"{self.first_name} {self.last_name}", self.email, self.phone
        )


@dataclass(frozen=True)
class EmployerIdentity:
    id: int
    company_name: str
    primary_email: Optional[str]
    main_phone: Optional[str]

    def to_contact(self) -> Contact:
        return Contact("EMPLOYER", self.id, self.company_name, self.primary_email, self.main_phone)


@dataclass(frozen=True)
class TaskHelperIdentity:
    id: int
    full_name: str
    primary_email: Optional[str]
    primary_phone: Optional[str]

    def to_contact(self) -> Contact:
        return Contact(
            "TASK_HELPER", self.id, self.full_name, self.primary_email, self.primary_phone
        )


Identity = Union[EmployeeIdentity, StakeholderIdentity, EmployerIdentity, TaskHelperIdentity]


def _load_employee(db: Session, person_id: int) -> Optional[EmployeeIdentity]:
    row = db.query(Employee).filter(Employee.id == person_id).first()
    if not row:
        return None
    return EmployeeIdentity(row.id, row.full_name, row.first_name, row.last_name, row.email, row.phone)


def _load_stakeholder(db: Session, person_id: int) -> Optional[StakeholderIdentity]:
    row = db.query(Stakeholder).filter(Stakeholder.id == person_id).first()
    if not row:
        return None
    return StakeholderIdentity(row.id, row.first_name, row.last_name, row.email, row.phone)


def _load_employer(db: Session, person_id: int) -> Optional[EmployerIdentity]:
    row = db.query(Employer).filter(Employer.id == person_id).first()
    if not row:
        return None
    return EmployerIdentity(row.id, row.company_name, row.primary_email, row.main_phone)


def _load_task_helper(db: Session, person_id: int) -> Optional[TaskHelperIdentity]:
    row = db.query(TaskHelper).filter(TaskHelper.id == person_id).first()
    if not row:
        return None
    return TaskHelperIdentity(row.id, row.full_name, row.primary_email, row.primary_phone)


IDENTITY_LOADERS = {
    "EMPLOYEE": _load_employee,
    "STAKEHOLDER": _load_stakeholder,
    "EMPLOYER": _load_employer,
    "TASK_HELPER": _load_task_helper,
}


class IdentityDirectory:
    """Read-only lookup of passenger contact details"""

    def __init__(self, db: Session):
        self.db = db

    def find_identity(self, person_type: str, person_id: int) -> Optional[Identity]:
        loader = IDENTITY_LOADERS.get(person_type)
        if loader is None:
            logger.warning(f"⚠️ Unknown person type: {person_type}")
            return None
        try:
            return loader(self.db, person_id)
        except SQLAlchemyError as e:
            logger.error(f"❌ Error fetching {person_type} {person_id} details: {e}")
            self.db.rollback()
            return None

    def find_contact(self, person_type: str, person_id: int) -> Optional[Contact]:
        identity = self.find_identity(person_type, person_id)
        return identity.to_contact() if identity else None
