"""Appointment and cat record definitions."""

from __future__ import annotations

import datetime as dt
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

SEX_MALE = "Male"
SEX_FEMALE = "Female"
SEX_UNKNOWN = "Unknown"

COMMON_SERVICES: List[str] = [
    "Revolution",
    "Ear Tip",
    "Snap Test",
    "Pain Meds To Go 1x",
    "Pain Meds To Go 2x",
    "Pain Meds To Go 3x",
    "Microchip",
    "E-Collar",
    "Proof Of Vax",
]


def normalize_sex(value: Any) -> str:
    """Map free-text sex input onto Male, Female, Unknown or blank."""

    text = "" if value is None else str(value).strip().lower()
    if text.startswith("m"):
        return SEX_MALE
    if text.startswith("f"):
        return SEX_FEMALE
    if not text:
        return ""
    return SEX_UNKNOWN


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _coerce_id(value: Any) -> Any:
    # Files exported by older builds carry numeric millisecond ids.
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


AppointmentId = Annotated[str, BeforeValidator(_coerce_id)]
Text = Annotated[str, BeforeValidator(_text)]


class RecordModel(BaseModel):
    """Base for records exchanged as camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Cat(RecordModel):
    """One animal attached to an appointment."""

    name: Text = ""
    age: Text = ""
    color: Text = ""
    breed: Text = ""
    sex: str = ""

    @field_validator("sex", mode="before")
    @classmethod
    def _normalize_sex(cls, value: Any) -> str:
        return normalize_sex(value)

    def is_blank(self) -> bool:
        """Return True when no field carries a value."""

        return not (self.name or self.age or self.color or self.breed or self.sex)


class AppointmentFields(RecordModel):
    """Editable appointment fields shared by drafts and stored records."""

    address: Text = ""
    phone: Text = ""
    email: Text = ""
    cats: List[Cat] = Field(default_factory=list)
    services_selected: List[str] = Field(default_factory=list)
    services_notes: Text = ""

    @field_validator("cats", "services_selected", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("services_selected")
    @classmethod
    def _dedupe_services(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(value))


class AppointmentDraft(AppointmentFields):
    """Form payload used to create or edit an appointment."""

    client_name: Text = ""
    date: Optional[dt.date] = None


class Appointment(AppointmentFields):
    """A scheduled visit, keyed by a stable opaque identifier."""

    id: AppointmentId
    client_name: Text
    date: dt.date

    @field_validator("client_name")
    @classmethod
    def _require_client_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Client Name is required")
        return value

    @property
    def cat_count(self) -> int:
        return len(self.cats)
