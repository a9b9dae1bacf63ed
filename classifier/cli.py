"""Classifier command line.

Modes:
  insert  only store the manually labelled dataset
  train   store the labelled dataset (if any), then train on the labelled rows
  apply   apply the models to the rows not yet classified

Without --mode, a labelled dataset means train, otherwise apply.
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from store.clean_contents import apply_labelled_rows, get_labelling_data, get_training_data, read_labelled_dataset, validate_selection
from store.db import get_engine, get_session, init_db
from store.errors import StorageError
from store.labels import bulk_upsert_labels, load_label_definitions

from .model_context import ModelContext, resolve_path
from .phases import apply_model, train_model

logger = logging.getLogger(__name__)

MODES = ("train", "apply", "insert")
EXIT_USAGE = 1
EXIT_STORAGE = 2


def build_parser() -> argparse.ArgumentParser:
	p = argparse.ArgumentParser(prog="classifier", description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
	p.add_argument("labelled_dataset", nargs="?", help="CSV file: cleanContentId;legal;label")
	p.add_argument("-d", "--labelled-dataset", dest="labelled_dataset_opt", help="same as the positional argument")
	p.add_argument("-l", "--legal-model", help="legal model JSON file (default legalModel.json)")
	p.add_argument("-c", "--class-model", help="class model JSON file (default classModel.json)")
	p.add_argument("-o", "--output-dir", help="directory the models are saved to")
	p.add_argument("-m", "--mode", choices=MODES)
	p.add_argument("-q", "--quantile", type=float, help="fraction (0, 1] of the matching rows to use")
	p.add_argument("-k", "--limit", type=int, help="maximum number of rows to use")
	p.add_argument("-v", "--verbose", action="store_true")
	return p


def resolve_mode(mode: Optional[str], labelled_dataset: Optional[str], context: ModelContext) -> str:
	if not mode:
		mode = "train" if labelled_dataset else "apply"
	if mode == "apply" and context.is_empty:
		raise ValueError("Cannot apply empty model. Please train first")
	return mode


def run(args: argparse.Namespace, session_factory: Callable[[], Session] = get_session) -> ModelContext:
	validate_selection(args.limit, args.quantile)
	dataset_path = args.labelled_dataset or args.labelled_dataset_opt
	context = ModelContext.load(args.legal_model, args.class_model)
	mode = resolve_mode(args.mode, dataset_path, context)
	logger.info("Running in %s mode", mode)

	session = session_factory()
	try:
		labels = bulk_upsert_labels(session, load_label_definitions())
		if dataset_path:
			rows = read_labelled_dataset(resolve_path(dataset_path))
			apply_labelled_rows(session, rows, labels)
		else:
			logger.info("No labelled data provided.")

		if mode == "train":
			context = train_model(context, get_training_data(session, args.limit, args.quantile))
		elif mode == "apply":
			context = apply_model(context, get_labelling_data(session, args.limit, args.quantile))
	finally:
		session.close()

	context.save(args.output_dir)
	return context


def main(argv: Optional[List[str]] = None, session_factory: Optional[Callable[[], Session]] = None) -> int:
	args = build_parser().parse_args(argv)
	logging.basicConfig(
		level=logging.DEBUG if args.verbose else logging.INFO,
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
	)
	if session_factory is None:
		init_db(get_engine())
		session_factory = get_session
	try:
		run(args, session_factory)
	except (ValueError, FileNotFoundError) as exc:
		logger.error("%s", exc)
		return EXIT_USAGE
	except StorageError as exc:
		logger.error("Storage failure: %s", exc)
		return EXIT_STORAGE
	return 0


if __name__ == "__main__":
	sys.exit(main())
