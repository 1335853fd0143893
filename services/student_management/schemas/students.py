# services/student_management/schemas/students.py

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class StudentOut(BaseModel):
    id: int
    roll_number: str
    admission_number: str
    name: str
    class_name: str = Field(..., alias="class")
    section: str
    division: str
    academic_year: str
    date_of_birth: date
    gender: str
    parent_name: str
    parent_phone: str
    parent_email: Optional[str]
    address: Optional[str]
    previous_school: Optional[str]
    admission_date: datetime
    is_active: bool

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)
