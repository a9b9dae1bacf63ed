from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .db import dialect_insert
from .errors import StorageError
from .models import Label

logger = logging.getLogger(__name__)

LABELS_PATH = Path(__file__).resolve().parents[1] / "classifier" / "labels.json"


def load_label_definitions(path: Optional[Path] = None) -> List[Dict[str, str]]:
	path = Path(path) if path else LABELS_PATH
	with path.open("r", encoding="utf-8") as f:
		raw = json.load(f)
	definitions = []
	for item in raw:
		label = (item.get("label") or "").strip()
		if not label:
			raise ValueError(f"label definition without a name in {path}")
		definitions.append({"label": label, "description": item.get("description")})
	return definitions


def bulk_upsert_labels(session: Session, definitions: Iterable[Dict[str, str]]) -> Dict[str, Label]:
	"""Insert new labels and refresh the description of known ones.

	Returns the stored labels indexed by label name.
	"""
	rows = [
		{"id": str(uuid.uuid4()), "label": d["label"], "description": d.get("description")}
		for d in definitions
	]
	if not rows:
		return {}
	table = Label.__table__
	try:
		insert = dialect_insert(session)
		stmt = insert(table).values(rows)
		stmt = stmt.on_conflict_do_update(
			index_elements=[table.c.label],
			set_={"description": stmt.excluded.description, "updated_at": func.now()},
		)
		session.execute(stmt)
		session.commit()
		names = [r["label"] for r in rows]
		labels = session.execute(select(Label).where(Label.label.in_(names))).scalars().all()
	except SQLAlchemyError as exc:
		session.rollback()
		logger.error("label upsert failed: %s", exc)
		raise StorageError("label upsert failed") from exc
	logger.info("upserted %d labels", len(labels))
	return {l.label: l for l in labels}
