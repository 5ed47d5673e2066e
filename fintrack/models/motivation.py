# fintrack/models/motivation.py
import uuid
from sqlalchemy import Column, String, ForeignKey, Integer, BigInteger, Uuid
from fintrack.core.database import Base

class MotivationLog(Base):
    __tablename__ = "motivation_logs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # Weak reference: no foreign key, the goal may be gone
    goal_id = Column(Uuid(as_uuid=True), nullable=True)
    goal_title = Column(String(length=200), nullable=True)
    score = Column(Integer, nullable=False, default=0)
    notes = Column(String(length=500), nullable=True)
    timestamp = Column(BigInteger, nullable=False, index=True)

    def __repr__(self):
        return f"<MotivationLog score={self.score} goal_id={self.goal_id} owner_id={self.owner_id}>"
