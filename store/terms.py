"""Vocabulary terms with document-frequency counters.

``bulk_upsert`` records a batch of term occurrences. A term seen for the
first time is inserted with a fresh id and keeps the default document
frequency of 0; every further occurrence, in the same or a later batch,
bumps the counter of the existing row by one and keeps its id.

Batches are serialized against each other for the whole transaction, so two
concurrent batches can never both see a term as absent.
"""
from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from typing import Dict, List, NamedTuple, Sequence

from sqlalchemy import func, text
from sqlalchemy.orm import Session

from .db import LOCK_TIMEOUT_MS, dialect_insert
from .errors import StorageError
from .models import Term

logger = logging.getLogger(__name__)

# rows per upsert statement; PostgreSQL caps bind parameters at 65535 and each row takes 2
UPSERT_CHUNK_SIZE = 1000


class TermRow(NamedTuple):
	id: str
	text: str


def _rounds(terms: Sequence[str]) -> List[List[str]]:
	"""Split occurrences so that round k holds the k-th occurrence of each distinct term.

	A single upsert statement may not touch the same row twice, so repeats
	within a batch go into later rounds.
	"""
	rounds: List[List[str]] = []
	seen: Dict[str, int] = defaultdict(int)
	for term in terms:
		k = seen[term]
		if k == len(rounds):
			rounds.append([])
		rounds[k].append(term)
		seen[term] += 1
	return rounds


def _lock_terms_table(session: Session, lock_timeout_ms: int) -> None:
	if session.get_bind().dialect.name != "postgresql":
		# SQLite holds the database write lock from the first upsert until commit
		return
	session.execute(text("SELECT set_config('lock_timeout', :timeout, true)"), {"timeout": f"{int(lock_timeout_ms)}ms"})
	# SHARE ROW EXCLUSIVE conflicts with itself: one batch at a time
	session.execute(text('LOCK TABLE ONLY "terms" IN SHARE ROW EXCLUSIVE MODE'))


def _upsert_round(session: Session, insert, round_terms: List[str]) -> Dict[str, str]:
	table = Term.__table__
	stmt = insert(table).values([{"id": str(uuid.uuid4()), "text": t} for t in round_terms])
	stmt = stmt.on_conflict_do_update(
		index_elements=[table.c.text],
		set_={
			"document_frequency": table.c.document_frequency + 1,
			"updated_at": func.now(),
		},
	).returning(table.c.id, table.c.text)
	return {row.text: row.id for row in session.execute(stmt)}


def bulk_upsert(session: Session, terms: Sequence[str], lock_timeout_ms: int = LOCK_TIMEOUT_MS) -> List[TermRow]:
	"""Insert new terms or increment the document frequency of existing ones.

	Returns one ``TermRow`` per input occurrence, in input order. The batch is
	a single transaction: on failure nothing is applied and ``StorageError``
	is raised.
	"""
	terms = list(terms)
	if not terms:
		return []
	rounds = _rounds(terms)
	logger.debug("upserting %d term occurrences in %d rounds", len(terms), len(rounds))
	ids: Dict[str, str] = {}
	try:
		insert = dialect_insert(session)
		_lock_terms_table(session, lock_timeout_ms)
		for round_terms in rounds:
			for start in range(0, len(round_terms), UPSERT_CHUNK_SIZE):
				ids.update(_upsert_round(session, insert, round_terms[start:start + UPSERT_CHUNK_SIZE]))
		session.commit()
	except StorageError:
		session.rollback()
		raise
	except Exception as exc:
		# driver errors outside SQLAlchemyError (encoding, NUL bytes) end the transaction too
		session.rollback()
		logger.error("term upsert of %d occurrences failed: %s", len(terms), exc)
		raise StorageError("term upsert failed") from exc
	return [TermRow(ids[t], t) for t in terms]
