# services/admissions/controllers/identifiers.py
"""
Identifier generation for the admission workflow.

Application numbers are handed out at submission time; roll numbers are
handed out when an application is approved and a student is enrolled.
"""
import asyncio
import logging
import random
import re
import time
import weakref
from datetime import date
from typing import Optional

from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from shared import config
from shared.exceptions import PersistenceError
from services.admissions.models.admissions import AdmissionApplication, RollNumberSequence
from services.student_management.models.students import Student

logger = logging.getLogger(__name__)

_BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"

# One lock per (class code, academic year); entries vanish once no request holds them.
_roll_number_locks = weakref.WeakValueDictionary()


def _to_base36(value: int) -> str:
    digits = []
    while True:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36[remainder])
        if not value:
            break
    return "".join(reversed(digits))


def make_application_number() -> str:
    millis = int(time.time() * 1000)
    return f"ADM{_to_base36(millis)}{random.randint(0, 999):03d}"


async def generate_application_number(db: AsyncSession) -> str:
    """Return an application number not yet used by any application."""
    for _ in range(config.APPLICATION_NUMBER_MAX_ATTEMPTS):
        candidate = make_application_number()
        result = await db.execute(
            select(AdmissionApplication.id).where(AdmissionApplication.application_number == candidate)
        )
        if result.scalar_one_or_none() is None:
            return candidate
        logger.warning(f"Application number {candidate} already taken, regenerating")
    raise PersistenceError("Could not generate a unique application number")


def current_academic_year(today: Optional[date] = None) -> str:
    if config.ACADEMIC_YEAR:
        return config.ACADEMIC_YEAR
    today = today or date.today()
    if today.month >= config.ACADEMIC_YEAR_START_MONTH:
        return str(today.year)
    return str(today.year - 1)


def normalize_class_code(class_name: str) -> str:
    """
    "3" -> "03", "Grade 6" -> "06", "Class 10" -> "10", "Nursery" -> "NUR".

    Names without an ASCII number use their first three letters or digits
    in any script ("केजी" -> "कज").
    """
    digits = re.findall(r"[0-9]+", class_name)
    if digits:
        return digits[0].zfill(2)
    letters = "".join(char for char in class_name if char.isalnum()).upper()
    if not letters:
        raise ValueError(f"Cannot derive a class code from {class_name!r}")
    return letters[:3]


def format_roll_number(academic_year: str, class_code: str, sequence: int) -> str:
    return f"{academic_year}{class_code}{sequence:03d}"


def roll_number_lock(class_code: str, academic_year: str) -> asyncio.Lock:
    key = (class_code, academic_year)
    lock = _roll_number_locks.get(key)
    if lock is None:
        lock = asyncio.Lock()
        _roll_number_locks[key] = lock
    return lock


async def count_enrolled_students(db: AsyncSession, class_name: str, academic_year: str) -> int:
    result = await db.execute(
        select(func.count(Student.id)).where(
            Student.class_name == class_name,
            Student.academic_year == academic_year,
        )
    )
    return result.scalar_one()


async def highest_roll_sequence(db: AsyncSession, academic_year: str, class_code: str) -> int:
    """Largest sequence already present in a roll number for this class code and year."""
    prefix = f"{academic_year}{class_code}"
    result = await db.execute(
        select(Student.roll_number).where(Student.roll_number.startswith(prefix, autoescape=True))
    )
    suffixes = [roll_number[len(prefix):] for roll_number in result.scalars().all()]
    return max((int(suffix) for suffix in suffixes if suffix.isdigit()), default=0)


async def generate_roll_number(
    db: AsyncSession,
    class_name: str,
    academic_year: str,
    verify_issued: bool = False,
) -> str:
    """
    Advance the (class, year) sequence inside the caller's transaction and
    return the next roll number.

    The first roll number of a class and year seeds the sequence from the
    number of students already enrolled there. A freshly seeded sequence,
    or any call with `verify_issued`, is moved past roll numbers students
    already hold. Otherwise a clash surfaces as an IntegrityError on flush
    for the caller to retry with `verify_issued=True`.
    """
    class_code = normalize_class_code(class_name)
    in_sequence = (
        RollNumberSequence.class_code == class_code,
        RollNumberSequence.academic_year == academic_year,
    )

    result = await db.execute(
        update(RollNumberSequence)
        .where(*in_sequence)
        .values(last_value=RollNumberSequence.last_value + 1)
        .returning(RollNumberSequence.last_value)
        .execution_options(synchronize_session=False)
    )
    sequence = result.scalar_one_or_none()

    if sequence is None:
        sequence = await count_enrolled_students(db, class_name, academic_year) + 1
        db.add(RollNumberSequence(class_code=class_code, academic_year=academic_year, last_value=sequence))
        await db.flush()
        verify_issued = True

    if not verify_issued:
        return format_roll_number(academic_year, class_code, sequence)

    highest = await highest_roll_sequence(db, academic_year, class_code)
    if sequence <= highest:
        logger.warning(
            f"Roll sequence {class_code}/{academic_year} at {sequence} is behind issued numbers, "
            f"moving to {highest + 1}"
        )
        sequence = highest + 1
        await db.execute(
            update(RollNumberSequence)
            .where(*in_sequence)
            .values(last_value=sequence)
            .execution_options(synchronize_session=False)
        )

    return format_roll_number(academic_year, class_code, sequence)
