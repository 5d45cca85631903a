"""Write-only decision logs for or-pattern resolutions."""

import abc
import datetime
import json
import logging
import pathlib
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Union

from ingredient_utils.database.utils import get_connection, transaction
from ingredient_utils.ingredients.models import DecisionRecord

logger = logging.getLogger(__name__)


class DecisionLog(abc.ABC):
    """Audit collaborator that accepts decision records."""

    @abc.abstractmethod
    def record(self, decision: DecisionRecord) -> None:
        """Store one decision record."""


class NullDecisionLog(DecisionLog):
    def record(self, decision: DecisionRecord) -> None:
        return None


class MemoryDecisionLog(DecisionLog):
    """Keeps records in a list, mostly useful in tests and notebooks."""

    def __init__(self):
        self.records: List[DecisionRecord] = []
        self._lock = threading.Lock()

    def record(self, decision: DecisionRecord) -> None:
        with self._lock:
            self.records.append(decision)


class SqliteDecisionLog(DecisionLog):
    """Appends records to the ``or_pattern_decision`` table."""

    def __init__(self, db_path: Union[str, pathlib.Path]):
        self.db_path = db_path

    def record(self, decision: DecisionRecord) -> None:
        conn = get_connection(self.db_path)
        try:
            with transaction(conn) as cur:
                cur.execute(
                    """
                    INSERT INTO or_pattern_decision(
                        recipe_id, recipe_title, original_text, option_names,
                        option_ingredient_ids, detected_as_equivalent, primary_choice,
                        parser_confidence, decision_reason, created_at
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        decision.recipe_id,
                        decision.recipe_title,
                        decision.raw_text,
                        json.dumps(list(decision.option_names)),
                        json.dumps(list(decision.option_ingredient_ids)),
                        int(decision.detected_as_equivalent),
                        decision.primary_choice,
                        decision.confidence,
                        decision.reason,
                        datetime.datetime.now(datetime.timezone.utc).isoformat(),
                    ),
                )
        finally:
            conn.close()


class BackgroundDecisionLog(DecisionLog):
    """Delivers records to another log on a worker thread.

    ``record`` returns immediately. Failures in the wrapped log are logged
    and dropped.

    Example:
        with BackgroundDecisionLog(SqliteDecisionLog("recipes.db")) as log:
            matcher = IngredientMatcher(directory, decision_log=log)
            ...
    """

    def __init__(self, inner: DecisionLog, max_workers: int = 1):
        self.inner = inner
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="decision-log"
        )

    def record(self, decision: DecisionRecord) -> None:
        future = self._executor.submit(self.inner.record, decision)
        future.add_done_callback(self._log_failure)

    @staticmethod
    def _log_failure(future: Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.warning(f"Failed to write decision record: {error}")

    def close(self, wait: bool = True) -> None:
        """Flush pending records and stop the worker."""
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> "BackgroundDecisionLog":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
