import enum


class RepairJobStatus(str, enum.Enum):
    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


ACTIVE_JOB_STATUSES = (RepairJobStatus.PENDING, RepairJobStatus.IN_PROGRESS)
