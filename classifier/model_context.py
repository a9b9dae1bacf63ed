from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent
LEGAL_MODEL_FILE = "legalModel.json"
CLASS_MODEL_FILE = "classModel.json"


def resolve_path(path: Optional[str], default_name: Optional[str] = None) -> Path:
	"""Relative paths are taken from the package directory, as is the default file."""
	if not path:
		return PACKAGE_DIR / default_name if default_name else PACKAGE_DIR
	p = Path(path)
	if not p.is_absolute():
		p = PACKAGE_DIR / p
	return Path(p.resolve())


def _load_model(path: Path) -> Dict[str, Any]:
	try:
		with path.open("r", encoding="utf-8") as f:
			model = json.load(f)
	except (OSError, ValueError):
		logger.warning("No model found at %s, using empty model", path)
		return {}
	if not isinstance(model, dict):
		logger.warning("Model at %s is not a JSON object, using empty model", path)
		return {}
	return model


@dataclass
class ModelContext:
	"""The legal and class models of one run, saved explicitly at checkpoints."""

	legal_model: Dict[str, Any] = field(default_factory=dict)
	class_model: Dict[str, Any] = field(default_factory=dict)

	@property
	def is_empty(self) -> bool:
		return not self.legal_model and not self.class_model

	@classmethod
	def load(cls, legal_path: Optional[str] = None, class_path: Optional[str] = None) -> "ModelContext":
		return cls(
			legal_model=_load_model(resolve_path(legal_path, LEGAL_MODEL_FILE)),
			class_model=_load_model(resolve_path(class_path, CLASS_MODEL_FILE)),
		)

	def save(self, output_dir: Optional[str] = None) -> Path:
		destination = resolve_path(output_dir)
		destination.mkdir(parents=True, exist_ok=True)
		for name, model in ((LEGAL_MODEL_FILE, self.legal_model), (CLASS_MODEL_FILE, self.class_model)):
			with (destination / name).open("w", encoding="utf-8") as f:
				json.dump(model, f)
		logger.info("Saved models to %s", destination)
		return destination
