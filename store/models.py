from datetime import datetime
from typing import Optional
from sqlalchemy import BigInteger, Boolean, Column, DateTime, Float, ForeignKey, String, Text, UniqueConstraint, func
from sqlalchemy.orm import relationship, Mapped

from .db import Base


class Term(Base):
	__tablename__ = "terms"
	__table_args__ = (
		UniqueConstraint("text", name="uq_term_text"),
	)

	# ids are uuid4 strings generated by the inserting caller
	id: Mapped[str] = Column(String(36), primary_key=True)
	text: Mapped[str] = Column(Text, nullable=False)
	document_frequency: Mapped[int] = Column(BigInteger, nullable=False, server_default="0")
	created_at: Mapped[datetime] = Column(DateTime, nullable=False, server_default=func.now())
	updated_at: Mapped[datetime] = Column(DateTime, nullable=False, server_default=func.now())


class Label(Base):
	__tablename__ = "labels"
	__table_args__ = (
		UniqueConstraint("label", name="uq_label_label"),
	)

	id: Mapped[str] = Column(String(36), primary_key=True)
	label: Mapped[str] = Column(String(128), nullable=False)
	description: Mapped[Optional[str]] = Column(Text, nullable=True)
	created_at: Mapped[datetime] = Column(DateTime, nullable=False, server_default=func.now())
	updated_at: Mapped[datetime] = Column(DateTime, nullable=False, server_default=func.now())

	clean_contents = relationship("CleanContent", back_populates="primary_label")


class CleanContent(Base):
	__tablename__ = "clean_contents"

	id: Mapped[str] = Column(String(36), primary_key=True)
	content: Mapped[Optional[str]] = Column(Text, nullable=True)
	# NULL until the row is labelled, by hand or by the classifier
	legal: Mapped[Optional[bool]] = Column(Boolean, nullable=True, index=True)
	legal_certainty: Mapped[Optional[float]] = Column(Float, nullable=True)
	class_certainty: Mapped[Optional[float]] = Column(Float, nullable=True)
	primary_label_id: Mapped[Optional[str]] = Column(String(36), ForeignKey("labels.id", ondelete="SET NULL"), nullable=True, index=True)
	created_at: Mapped[datetime] = Column(DateTime, nullable=False, server_default=func.now())
	updated_at: Mapped[datetime] = Column(DateTime, nullable=False, server_default=func.now())

	primary_label = relationship("Label", back_populates="clean_contents")
