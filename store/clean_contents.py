from __future__ import annotations

import csv
import logging
import math
from pathlib import Path
from typing import Dict, Iterable, List, NamedTuple, Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import StorageError
from .models import CleanContent, Label

logger = logging.getLogger(__name__)

# manual labels are taken as certain
MANUAL_CERTAINTY = 1.0


class LabelledRow(NamedTuple):
	clean_content_id: str
	legal: bool
	label: str


def read_labelled_dataset(path: Path) -> List[LabelledRow]:
	"""Parse a manually labelled dataset. The header line is required:

	cleanContentId;legal;label
	408751f4-4dab-46a3-a6e1-110b32e9e98b;legal;Mail
	"""
	path = Path(path)
	if not path.exists():
		raise FileNotFoundError(f"Labelled dataset not found at {path}")
	rows = []
	with path.open("r", encoding="utf-8", newline="") as f:
		reader = csv.DictReader(f, delimiter=";", quotechar='"')
		for row in reader:
			clean_content_id = (row.get("cleanContentId") or "").strip()
			if not clean_content_id:
				continue
			legal = (row.get("legal") or "").strip() == "legal"
			label = (row.get("label") or "").strip()
			rows.append(LabelledRow(clean_content_id, legal, label))
	return rows


def apply_labelled_rows(session: Session, rows: Iterable[LabelledRow], labels_by_name: Dict[str, Label]) -> int:
	"""Write manual labels onto the referenced clean contents. Returns the number of rows matched."""
	matched = 0
	try:
		for row in rows:
			label = labels_by_name.get(row.label)
			if label is None:
				logger.warning("unknown label %r for clean content %s", row.label, row.clean_content_id)
			result = session.execute(
				update(CleanContent)
				.where(CleanContent.id == row.clean_content_id)
				.values(
					legal=row.legal,
					legal_certainty=MANUAL_CERTAINTY,
					class_certainty=MANUAL_CERTAINTY,
					primary_label_id=label.id if label is not None else None,
					updated_at=func.now(),
				)
			)
			if result.rowcount == 0:
				logger.warning("clean content %s not found", row.clean_content_id)
			matched += result.rowcount
		session.commit()
	except SQLAlchemyError as exc:
		session.rollback()
		logger.error("storing labelled rows failed: %s", exc)
		raise StorageError("storing labelled rows failed") from exc
	logger.info("labelled %d clean contents", matched)
	return matched


def validate_selection(limit: Optional[int], quantile: Optional[float]) -> None:
	if limit is not None and limit < 0:
		raise ValueError("limit must not be negative")
	if quantile is not None and not 0 < quantile <= 1:
		raise ValueError("quantile must be in (0, 1]")


def _select_rows(session: Session, labelled: bool, limit: Optional[int], quantile: Optional[float]) -> List[CleanContent]:
	validate_selection(limit, quantile)
	condition = CleanContent.legal.isnot(None) if labelled else CleanContent.legal.is_(None)
	try:
		if quantile is not None:
			total = session.execute(select(func.count()).select_from(CleanContent).where(condition)).scalar_one()
			cap = math.ceil(total * quantile)
			limit = cap if limit is None else min(limit, cap)
		query = select(CleanContent).where(condition).order_by(CleanContent.created_at, CleanContent.id)
		if limit is not None:
			query = query.limit(limit)
		return list(session.execute(query).scalars().all())
	except SQLAlchemyError as exc:
		raise StorageError("loading clean contents failed") from exc


def get_training_data(session: Session, limit: Optional[int] = None, quantile: Optional[float] = None) -> List[CleanContent]:
	return _select_rows(session, True, limit, quantile)


def get_labelling_data(session: Session, limit: Optional[int] = None, quantile: Optional[float] = None) -> List[CleanContent]:
	return _select_rows(session, False, limit, quantile)
