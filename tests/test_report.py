import json
import unittest
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fixtures import SAMPLE_RESUME  # noqa: E402
from resume_optimizer.schemas.optimization import Keyword, Suggestion  # noqa: E402
from resume_optimizer.services.report import build_report, render_report  # noqa: E402
from resume_optimizer.services.state_store import OptimizationStateStore  # noqa: E402


class ReportTests(unittest.TestCase):
    def setUp(self):
        store = OptimizationStateStore(
            SAMPLE_RESUME,
            [
                Suggestion(id="s1", type="content", text="Quantify results"),
                Suggestion(id="s2", type="skills", text="Group skills"),
            ],
            [Keyword(id="k1", text="Terraform"), Keyword(id="k2", text="Helm")],
            base_score=70,
        )
        store.toggle_suggestion(0)
        store.toggle_keyword(1)
        self.state = store.snapshot()

    def test_build_report(self):
        report = build_report(self.state)
        self.assertEqual(report.initial_score, 70)
        self.assertEqual(report.final_score, 73)
        self.assertEqual(report.potential_score, 76)
        self.assertEqual(report.improvement, 3)
        self.assertEqual(report.applied_suggestion_count, 1)
        self.assertEqual(report.suggestion_types, {"content": 1})
        self.assertEqual(report.applied_keywords, ["Helm"])

    def test_json_format(self):
        payload = json.loads(render_report(self.state, "json"))
        self.assertEqual(payload["final_score"], 73)
        self.assertIn("experience", payload["section_scores"])

    def test_markdown_format(self):
        body = render_report(self.state, "markdown")
        self.assertTrue(body.startswith("# Resume Optimization Report"))
        self.assertIn("- **Improvement**: +3 points", body)
        self.assertIn("- Helm", body)

    def test_csv_format(self):
        lines = render_report(self.state, "csv").splitlines()
        self.assertEqual(lines[0], "metric,value")
        self.assertIn("final_score,73", lines)
        self.assertIn("keywords,Helm", lines)

    def test_unknown_format(self):
        with self.assertRaises(ValueError):
            render_report(self.state, "xml")


if __name__ == "__main__":
    unittest.main()
