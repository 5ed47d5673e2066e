# fintrack/models/goal.py
import enum
import uuid
from sqlalchemy import Column, String, ForeignKey, BigInteger, Enum, JSON, Uuid
from fintrack.core.database import Base

class GoalStatus(str, enum.Enum):
    in_progress = "in_progress"
    done = "done"
    failed = "failed"

class Goal(Base):
    __tablename__ = "goals"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(length=200), nullable=False)
    status = Column(Enum(GoalStatus), default=GoalStatus.in_progress, nullable=False)
    # Embedded [{id, text, status}], always rewritten as a whole list
    subgoals = Column(JSON, nullable=False, default=list)
    created_at = Column(BigInteger, nullable=False)

    def __repr__(self):
        return f"<Goal title={self.title} status={self.status} owner_id={self.owner_id}>"
