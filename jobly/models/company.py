from sqlalchemy import Column, Integer, String, Text, CheckConstraint
from sqlalchemy.orm import relationship
from jobly.core.database import Base


class Company(Base):
    """
    Company table.

    Reads and writes go through jobly.crud.company with parameterized SQL;
    this model only declares the table.
    """
    __tablename__ = "companies"

    handle = Column(String(25), primary_key=True)
    name = Column(Text, nullable=False, index=True)
    num_employees = Column(Integer, CheckConstraint("num_employees >= 0"), nullable=True)
    description = Column(Text, nullable=True)
    logo_url = Column(Text, nullable=True)

    jobs = relationship("Job", back_populates="company", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Company(handle='{self.handle}', name='{self.name}')>"
