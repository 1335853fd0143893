from .admissions import (
    AdmissionApplication,
    AdmissionStatus,
    AdmissionPriority,
    DocumentStatus,
    RollNumberSequence,
    TERMINAL_STATUSES,
)
