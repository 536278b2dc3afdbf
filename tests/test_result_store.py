import tempfile
import unittest
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fixtures import SAMPLE_RESUME  # noqa: E402
from resume_optimizer.core.errors import PersistenceFailed  # noqa: E402
from resume_optimizer.core.result_store import SQLiteResultSink  # noqa: E402
from resume_optimizer.schemas.optimization import OptimizationResult, Suggestion  # noqa: E402
from resume_optimizer.services.state_store import OptimizationStateStore  # noqa: E402


def _result() -> OptimizationResult:
    return OptimizationResult(
        optimized_text=SAMPLE_RESUME,
        ats_score=81,
        suggestions=[Suggestion(id="s1", text="Add metrics")],
        provider="gemini",
        language="en",
    )


class SQLiteResultSinkTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)

    def test_save_and_get(self):
        sink = SQLiteResultSink(str(Path(self._tmp.name) / "nested" / "results.db"))
        self.addCleanup(sink.close)
        result = _result()
        breakdown = OptimizationStateStore.from_result(result).get_breakdown()

        result_id = sink.save(result, breakdown)
        stored = sink.get(result_id)

        self.assertEqual(stored["provider"], "gemini")
        self.assertEqual(stored["ats_score"], 81)
        self.assertEqual(stored["result"]["optimized_text"], SAMPLE_RESUME)
        self.assertEqual(stored["breakdown"]["base"], 81)
        self.assertIsNone(sink.get("missing"))

    def test_unwritable_path_raises_persistence_failed(self):
        sink = SQLiteResultSink(self._tmp.name)
        result = _result()
        with self.assertRaises(PersistenceFailed):
            sink.save(result, OptimizationStateStore.from_result(result).get_breakdown())


if __name__ == "__main__":
    unittest.main()
