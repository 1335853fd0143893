# services/admissions/controllers/admission_service.py
"""
Admission application lifecycle: submission, review and enrollment.

An application is submitted as ``pending``, may move through the review
states, and is closed exactly once by approval (which enrolls a Student)
or rejection. Closed applications are never modified again.
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from shared import config
from shared.exceptions import ConflictError, NotFoundError, PersistenceError, ValidationError
from services.admissions.models.admissions import (
    AdmissionApplication,
    AdmissionStatus,
    DocumentStatus,
    TERMINAL_STATUSES,
)
from services.admissions.schemas.admissions import AdmissionCreate, AdmissionStatusUpdate
from services.admissions.controllers.identifiers import (
    current_academic_year,
    generate_application_number,
    generate_roll_number,
    normalize_class_code,
    roll_number_lock,
)
from services.student_management.models.students import Student

logger = logging.getLogger(__name__)

PLACEHOLDER_DOCUMENTS = ("Birth Certificate", "Previous School Records")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_document_id() -> str:
    return uuid.uuid4().hex[:12]


def _placeholder_documents(uploaded_at: datetime) -> List[dict]:
    return [
        {
            "id": _new_document_id(),
            "name": name,
            "type": None,
            "status": DocumentStatus.PENDING.value,
            "upload_date": uploaded_at.isoformat(),
            "size": None,
        }
        for name in PLACEHOLDER_DOCUMENTS
    ]


def _ensure_open(application: AdmissionApplication, action: str):
    if application.status in TERMINAL_STATUSES:
        raise ConflictError(
            f"Cannot {action} application {application.application_number}: "
            f"it is already {application.status.value}"
        )


async def _get_application(db: AsyncSession, admission_id: int, for_update: bool = False) -> AdmissionApplication:
    stmt = select(AdmissionApplication).where(AdmissionApplication.id == admission_id)
    if for_update:
        stmt = stmt.with_for_update()
    result = await db.execute(stmt)
    application = result.scalar_one_or_none()
    if not application:
        raise NotFoundError(f"Admission application {admission_id} not found")
    return application


# --- CREATE ---
async def create_admission(db: AsyncSession, payload: AdmissionCreate) -> AdmissionApplication:
    submitted_at = _now()

    if payload.documents:
        documents = [document.model_dump(mode="json") for document in payload.documents]
        for document in documents:
            document["id"] = document.get("id") or _new_document_id()
            document["upload_date"] = document.get("upload_date") or submitted_at.isoformat()
    else:
        documents = _placeholder_documents(submitted_at)

    fields = payload.model_dump(exclude={"documents"})

    for attempt in range(1, config.APPLICATION_NUMBER_MAX_ATTEMPTS + 1):
        application = AdmissionApplication(
            **fields,
            application_number=await generate_application_number(db),
            status=AdmissionStatus.PENDING,
            documents=documents,
        )
        db.add(application)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            logger.warning(f"Application number collision on attempt {attempt}, retrying")
            continue

        await db.refresh(application)
        logger.info(
            f"Admission application {application.application_number} submitted "
            f"for {application.student_name} (class {application.class_name})"
        )
        return application

    raise PersistenceError("Could not generate a unique application number")


# --- LIST / GET ---
async def list_admissions(
    db: AsyncSession,
    search: Optional[str] = None,
    status: Optional[AdmissionStatus] = None,
    class_name: Optional[str] = None,
) -> List[AdmissionApplication]:
    """Newest applications first."""
    stmt = select(AdmissionApplication)

    if search and search.strip():
        term = search.strip()
        stmt = stmt.where(
            or_(
                AdmissionApplication.student_name.icontains(term, autoescape=True),
                AdmissionApplication.application_number.icontains(term, autoescape=True),
                AdmissionApplication.parent_name.icontains(term, autoescape=True),
            )
        )
    if status:
        stmt = stmt.where(AdmissionApplication.status == status)
    if class_name:
        stmt = stmt.where(AdmissionApplication.class_name == class_name)

    result = await db.execute(stmt.order_by(AdmissionApplication.id.desc()))
    return result.scalars().all()


async def get_admission(db: AsyncSession, admission_id: int) -> AdmissionApplication:
    return await _get_application(db, admission_id)


# --- APPROVE ---
def _build_student(
    application: AdmissionApplication,
    roll_number: str,
    academic_year: str,
    admitted_at: datetime,
) -> Student:
    gender = application.gender
    if not gender:
        gender = config.DEFAULT_STUDENT_GENDER
        logger.warning(
            f"Application {application.application_number} has no gender, defaulting to {gender!r}"
        )

    section = application.section
    if not section:
        section = config.DEFAULT_STUDENT_SECTION
        logger.warning(
            f"Application {application.application_number} has no section, defaulting to {section!r}"
        )

    return Student(
        roll_number=roll_number,
        admission_number=application.application_number,
        name=application.student_name,
        class_name=application.class_name,
        section=section,
        division=f"{application.class_name}-{section}",
        academic_year=academic_year,
        date_of_birth=application.date_of_birth,
        gender=gender,
        parent_name=application.parent_name,
        parent_phone=application.phone,
        parent_email=application.email,
        address=application.address,
        previous_school=application.previous_school,
        admission_date=admitted_at,
        is_active=True,
    )


async def approve_admission(db: AsyncSession, admission_id: int) -> Tuple[Student, AdmissionApplication]:
    """
    Enroll the applicant as a Student and close the application as approved.

    The student row, the roll number sequence step and the application
    update are committed together. Approvals for the same class and
    academic year are serialized so roll numbers are handed out one at a
    time; a uniqueness conflict rolls everything back and retries.
    """
    application = await _get_application(db, admission_id)
    _ensure_open(application, "approve")

    application_number = application.application_number
    academic_year = current_academic_year()
    class_code = normalize_class_code(application.class_name)

    async with roll_number_lock(class_code, academic_year):
        for attempt in range(1, config.ROLL_NUMBER_MAX_ATTEMPTS + 1):
            # Re-read under row lock: another request may have closed it meanwhile.
            await db.refresh(application, with_for_update=True)
            _ensure_open(application, "approve")

            approved_at = _now()
            try:
                roll_number = await generate_roll_number(
                    db, application.class_name, academic_year, verify_issued=attempt > 1
                )
                student = _build_student(application, roll_number, academic_year, approved_at)
                db.add(student)
                await db.flush()

                application.status = AdmissionStatus.APPROVED
                application.approved_date = approved_at
                application.student_id = student.id
                await db.commit()
            except IntegrityError as e:
                await db.rollback()
                logger.warning(
                    f"Uniqueness conflict approving {application_number} "
                    f"(attempt {attempt}/{config.ROLL_NUMBER_MAX_ATTEMPTS}): {e.orig}"
                )
                continue
            except SQLAlchemyError:
                await db.rollback()
                logger.exception(f"Approval of {application_number} failed")
                raise PersistenceError("Failed to approve admission")

            await db.refresh(student)
            await db.refresh(application)
            logger.info(
                f"Application {application_number} approved: student {student.id} "
                f"enrolled with roll number {student.roll_number}"
            )
            return student, application

    raise PersistenceError("Could not allocate a unique roll number")


# --- REJECT ---
async def reject_admission(db: AsyncSession, admission_id: int, remarks: Optional[str] = None) -> AdmissionApplication:
    application = await _get_application(db, admission_id, for_update=True)
    _ensure_open(application, "reject")

    application.status = AdmissionStatus.REJECTED
    application.rejected_date = _now()
    if remarks is not None:
        application.remarks = remarks

    await db.commit()
    await db.refresh(application)
    logger.info(f"Application {application.application_number} rejected")
    return application


# --- REVIEW STATES ---
async def update_admission_status(
    db: AsyncSession,
    admission_id: int,
    payload: AdmissionStatusUpdate,
) -> AdmissionApplication:
    if payload.status in TERMINAL_STATUSES:
        raise ValidationError(
            f"Status {payload.status.value!r} can only be set through the approve or reject endpoints"
        )

    application = await _get_application(db, admission_id, for_update=True)
    _ensure_open(application, "update")

    if payload.status == AdmissionStatus.INTERVIEW_SCHEDULED and not (payload.interview_date or application.interview_date):
        raise ValidationError("interviewDate is required to schedule an interview")

    previous = application.status
    application.status = payload.status
    if payload.interview_date is not None:
        application.interview_date = payload.interview_date
    if payload.remarks is not None:
        application.remarks = payload.remarks

    await db.commit()
    await db.refresh(application)
    logger.info(
        f"Application {application.application_number} moved from {previous.value} to {application.status.value}"
    )
    return application


async def update_document_status(
    db: AsyncSession,
    admission_id: int,
    document_id: str,
    status: DocumentStatus,
) -> AdmissionApplication:
    application = await _get_application(db, admission_id, for_update=True)
    _ensure_open(application, "update documents of")

    documents = [dict(document) for document in application.documents]
    for document in documents:
        if document.get("id") == document_id:
            document["status"] = status.value
            break
    else:
        raise NotFoundError(f"Document {document_id} not found on application {application.application_number}")

    # Reassign so the JSON column is flagged dirty.
    application.documents = documents
    await db.commit()
    await db.refresh(application)
    logger.info(f"Document {document_id} on {application.application_number} marked {status.value}")
    return application
