import json
import unittest
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fixtures import LONG_OPTIMIZED_TEXT, SAMPLE_RESUME  # noqa: E402
from providers import FakeProvider  # noqa: E402
from resume_optimizer.core.errors import AllProvidersFailed, InputTooShort, PersistenceFailed  # noqa: E402
from resume_optimizer.schemas.optimization import Suggestion  # noqa: E402
from resume_optimizer.services.optimization_service import OptimizationService  # noqa: E402
from resume_optimizer.services.orchestrator import ProviderOrchestrator  # noqa: E402

RESPONSE = json.dumps(
    {
        "optimizedText": LONG_OPTIMIZED_TEXT,
        "atsScore": 72,
        "suggestions": [{"text": "Add metrics", "pointImpact": 3}],
        "keywords": ["Terraform"],
    }
)


class RecordingSink:
    def __init__(self, error=None):
        self.error = error
        self.saved = []

    def save(self, result, breakdown):
        if self.error is not None:
            raise self.error
        self.saved.append((result, breakdown))
        return f"result-{len(self.saved)}"


def _service(*providers, sink=None):
    return OptimizationService(ProviderOrchestrator(list(providers)), sink=sink, min_resume_chars=50)


class OptimizationServiceTests(unittest.IsolatedAsyncioTestCase):
    async def test_optimize_builds_session_state(self):
        provider = FakeProvider("openai", response=RESPONSE)
        run = await _service(provider).optimize(SAMPLE_RESUME, "en")

        self.assertEqual(run.result.provider, "openai")
        self.assertEqual(run.result.ats_score, 72)
        self.assertEqual(run.store.get_score(), 72)
        self.assertEqual(run.store.potential_score(), 76)
        self.assertEqual(run.breakdown.base, 72)
        self.assertIsNone(run.result_id)
        self.assertIn(SAMPLE_RESUME, provider.calls[0][1])

    async def test_short_input_is_rejected_before_any_call(self):
        provider = FakeProvider("openai", response=RESPONSE)
        with self.assertRaises(InputTooShort) as ctx:
            await _service(provider).optimize("   too short   ", "en")
        self.assertEqual(ctx.exception.length, 9)
        self.assertEqual(ctx.exception.status_code, 422)
        self.assertEqual(provider.calls, [])

    async def test_all_providers_failed_propagates(self):
        service = _service(
            FakeProvider("openai", error=RuntimeError("down")),
            FakeProvider("gemini", error=RuntimeError("down")),
            FakeProvider("claude", error=RuntimeError("down")),
        )
        with self.assertRaises(AllProvidersFailed) as ctx:
            await service.optimize(SAMPLE_RESUME)
        self.assertEqual(len(ctx.exception.attempts), 3)

    async def test_result_is_handed_to_sink(self):
        sink = RecordingSink()
        run = await _service(FakeProvider("openai", response=RESPONSE), sink=sink).optimize(SAMPLE_RESUME)
        self.assertEqual(run.result_id, "result-1")
        saved_result, saved_breakdown = sink.saved[0]
        self.assertEqual(saved_result, run.result)
        self.assertEqual(saved_breakdown.total, 72)

    async def test_sink_failure_keeps_session_usable(self):
        sink = RecordingSink(error=OSError("disk full"))
        service = _service(FakeProvider("openai", response=RESPONSE), sink=sink)
        with self.assertRaises(PersistenceFailed) as ctx:
            await service.optimize(SAMPLE_RESUME)

        run = ctx.exception.run
        self.assertIsNotNone(run)
        self.assertIn("disk full", str(ctx.exception))
        self.assertEqual(run.store.toggle_suggestion(0).score, 75)

    async def test_reoptimize_sends_applied_items(self):
        provider = FakeProvider("claude", response=RESPONSE)
        applied = [Suggestion(id="s1", type="skills", text="Group skills by domain", is_applied=True)]
        run = await _service(provider).reoptimize(SAMPLE_RESUME, applied, ["Kubernetes", "Helm"], "de")

        _, user_prompt = provider.calls[0]
        self.assertIn("[SKILLS] Group skills by domain", user_prompt)
        self.assertIn("Kubernetes, Helm", user_prompt)
        self.assertEqual(run.result.language, "de")

    async def test_reoptimize_validates_input(self):
        provider = FakeProvider("claude", response=RESPONSE)
        with self.assertRaises(InputTooShort):
            await _service(provider).reoptimize("", [], [])
        self.assertEqual(provider.calls, [])


if __name__ == "__main__":
    unittest.main()
