# fintrack/models/fixed_settings.py
import uuid
from sqlalchemy import Column, ForeignKey, Float, BigInteger, Uuid
from fintrack.core.database import Base

class FixedSettings(Base):
    __tablename__ = "fixed_settings"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # At most one document per owner
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    fixed_salary = Column(Float, nullable=False, default=0.0)
    fixed_debt = Column(Float, nullable=False, default=0.0)
    fixed_savings = Column(Float, nullable=False, default=0.0)
    updated_at = Column(BigInteger, nullable=True)

    def __repr__(self):
        return f"<FixedSettings salary={self.fixed_salary} owner_id={self.owner_id}>"
