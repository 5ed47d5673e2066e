# fintrack/models/record.py
import uuid
from sqlalchemy import Column, String, ForeignKey, Float, BigInteger, Uuid
from fintrack.core.database import Base

class FinancialRecord(Base):
    __tablename__ = "financial_records"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # Raw tag as entered (Income, Salary, Savings_Deposit, Bonus, ...); see utils/classifier.py
    kind = Column(String(length=50), nullable=False)
    amount = Column(Float, nullable=False, default=0.0)
    description = Column(String(length=255), nullable=True)
    # Milliseconds since epoch, set once at creation
    timestamp = Column(BigInteger, nullable=False, index=True)

    def __repr__(self):
        return f"<FinancialRecord kind={self.kind} amount={self.amount} owner_id={self.owner_id}>"
