# services/admissions/schemas/admissions.py

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from services.admissions.models.admissions import AdmissionPriority, AdmissionStatus, DocumentStatus
from services.admissions.controllers.identifiers import normalize_class_code
from services.student_management.schemas.students import StudentOut


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DocumentInfo(CamelModel):
    id: Optional[str] = None
    name: str = Field(..., min_length=1)
    type: Optional[str] = None
    status: DocumentStatus = DocumentStatus.PENDING
    upload_date: Optional[datetime] = None
    size: Optional[str] = None


class AdmissionCreate(CamelModel):
    # Student
    student_name: str = Field(..., min_length=1, max_length=150)
    date_of_birth: date
    gender: Optional[str] = Field(None, max_length=20)
    class_name: str = Field(..., alias="class", min_length=1, max_length=50)
    section: Optional[str] = Field(None, max_length=10)

    # Guardian
    parent_name: str = Field(..., min_length=1, max_length=150)
    parent_occupation: Optional[str] = Field(None, max_length=150)
    phone: str = Field(..., min_length=5, max_length=30)
    email: Optional[EmailStr] = None
    address: Optional[str] = None

    # Prior schooling
    previous_school: Optional[str] = Field(None, max_length=200)
    previous_class: Optional[str] = Field(None, max_length=50)

    priority: AdmissionPriority = AdmissionPriority.NORMAL
    documents: List[DocumentInfo] = Field(default_factory=list)
    remarks: Optional[str] = None

    @field_validator("student_name", "class_name", "parent_name", "phone")
    @classmethod
    def strip_required_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("class_name")
    @classmethod
    def class_has_code(cls, value: str) -> str:
        try:
            normalize_class_code(value)
        except ValueError:
            raise ValueError("must contain a class number or name") from None
        return value

    @field_validator("gender", "section", mode="before")
    @classmethod
    def blank_as_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class AdmissionOut(CamelModel):
    id: int
    application_number: str
    student_name: str
    date_of_birth: date
    gender: Optional[str]
    class_name: str = Field(..., alias="class")
    section: Optional[str]
    parent_name: str
    parent_occupation: Optional[str]
    phone: str
    email: Optional[str]
    address: Optional[str]
    previous_school: Optional[str]
    previous_class: Optional[str]
    status: AdmissionStatus
    priority: AdmissionPriority
    documents: List[DocumentInfo]
    remarks: Optional[str]
    interview_date: Optional[datetime]
    application_date: datetime
    approved_date: Optional[datetime]
    rejected_date: Optional[datetime]
    student_id: Optional[int]

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class AdmissionReject(CamelModel):
    remarks: Optional[str] = Field(None, max_length=2000)


class AdmissionStatusUpdate(CamelModel):
    status: AdmissionStatus
    remarks: Optional[str] = Field(None, max_length=2000)
    interview_date: Optional[datetime] = None


class DocumentStatusUpdate(CamelModel):
    status: DocumentStatus


class AdmissionApproveResponse(CamelModel):
    message: str
    student: StudentOut
    admission: AdmissionOut
    roll_number: str
    admission_number: str
