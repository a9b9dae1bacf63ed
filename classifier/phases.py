from __future__ import annotations

import logging
from typing import Sequence

from store.models import CleanContent

from .model_context import ModelContext

logger = logging.getLogger(__name__)


# No learning algorithm is wired in yet: both phases receive their dataset and
# leave the models as they are. Learners plug in here.

def train_model(context: ModelContext, dataset: Sequence[CleanContent]) -> ModelContext:
	logger.info("Training on %d labelled clean contents", len(dataset))
	return context


def apply_model(context: ModelContext, dataset: Sequence[CleanContent]) -> ModelContext:
	logger.info("Applying models to %d unlabelled clean contents", len(dataset))
	return context
