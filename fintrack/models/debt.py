# fintrack/models/debt.py
import enum
import uuid
from sqlalchemy import Column, ForeignKey, Float, BigInteger, Enum, Uuid
from fintrack.core.database import Base

class DebtEvent(str, enum.Enum):
    init = "init"
    repayment = "repayment"

class DebtStatus(Base):
    __tablename__ = "debt_status"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    initial_debt = Column(Float, nullable=False, default=0.0)
    # Never above initial_debt, never below zero
    current_debt = Column(Float, nullable=False, default=0.0)
    last_updated = Column(BigInteger, nullable=False)

    def __repr__(self):
        return f"<DebtStatus current={self.current_debt}/{self.initial_debt} owner_id={self.owner_id}>"

class RepaymentLogEntry(Base):
    __tablename__ = "repayment_log"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    event = Column(Enum(DebtEvent), nullable=False)
    amount = Column(Float, nullable=False)
    # Debt left after this event, not the delta
    remaining_debt = Column(Float, nullable=False)
    timestamp = Column(BigInteger, nullable=False, index=True)

    def __repr__(self):
        return f"<RepaymentLogEntry {self.event} remaining={self.remaining_debt} owner_id={self.owner_id}>"
