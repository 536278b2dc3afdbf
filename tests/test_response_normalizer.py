import json
import unittest
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fixtures import FRENCH_RESUME, LONG_OPTIMIZED_TEXT, SAMPLE_RESUME  # noqa: E402
from resume_optimizer.scoring import heuristic_base_score  # noqa: E402
from resume_optimizer.services.response_normalizer import ResponseNormalizer  # noqa: E402


def _payload(**overrides):
    payload = {
        "optimizedText": LONG_OPTIMIZED_TEXT,
        "atsScore": 82,
        "suggestions": [
            {"id": "s1", "type": "content", "text": "Quantify the migration project", "pointImpact": 3},
            {"id": "s2", "type": "skills", "text": "Group skills by domain"},
        ],
        "keywords": [{"id": "k1", "text": "Kubernetes", "relevance": 0.9}, "Terraform"],
        "improvements": ["Tightened summary"],
    }
    payload.update(overrides)
    return payload


class ResponseNormalizerTests(unittest.TestCase):
    def setUp(self):
        self.normalizer = ResponseNormalizer()

    def _assert_invariants(self, result):
        self.assertTrue(result.optimized_text)
        self.assertGreaterEqual(result.ats_score, 0)
        self.assertLessEqual(result.ats_score, 100)
        self.assertLessEqual(len(result.suggestions), 5)
        self.assertLessEqual(len(result.keywords), 10)

    def test_well_formed_json_is_mapped(self):
        result = self.normalizer.normalize(json.dumps(_payload()), SAMPLE_RESUME, provider="openai")
        self.assertEqual(result.optimized_text, LONG_OPTIMIZED_TEXT)
        self.assertEqual(result.ats_score, 82)
        self.assertEqual([item.id for item in result.suggestions], ["s1", "s2"])
        self.assertEqual(result.suggestions[0].point_impact, 3)
        self.assertEqual(result.suggestions[1].point_impact, 2)
        self.assertEqual([item.text for item in result.keywords], ["Kubernetes", "Terraform"])
        self.assertEqual(result.keywords[1].id, "k2")
        self.assertEqual(result.improvements, ["Tightened summary"])
        self.assertEqual(result.provider, "openai")

    def test_out_of_range_score_is_clamped(self):
        result = self.normalizer.normalize(json.dumps(_payload(atsScore=150)), SAMPLE_RESUME)
        self.assertEqual(result.ats_score, 100)

    def test_short_optimized_text_is_replaced_with_original(self):
        result = self.normalizer.normalize(json.dumps(_payload(optimizedText="A" * 80)), SAMPLE_RESUME)
        self.assertEqual(result.optimized_text, SAMPLE_RESUME)

    def test_fenced_json_with_empty_suggestions_gets_fallback(self):
        text_250 = ("x" * 249) + "."
        raw = "```json\n" + json.dumps(_payload(optimizedText=text_250, suggestions=[])) + "\n```"
        result = self.normalizer.normalize(raw, SAMPLE_RESUME)
        self.assertEqual(result.optimized_text, text_250)
        self.assertGreaterEqual(len(result.suggestions), 1)
        self.assertLessEqual(len(result.suggestions), 5)
        for item in result.suggestions:
            self.assertTrue(item.text.strip())

    def test_arrays_are_truncated(self):
        suggestions = [{"text": f"Suggestion number {n}"} for n in range(8)]
        keywords = [f"Term{n}" for n in range(15)]
        result = self.normalizer.normalize(
            json.dumps(_payload(suggestions=suggestions, keywords=keywords)), SAMPLE_RESUME
        )
        self.assertEqual(len(result.suggestions), 5)
        self.assertEqual(len(result.keywords), 10)
        self.assertEqual([item.id for item in result.suggestions], ["s1", "s2", "s3", "s4", "s5"])

    def test_json_embedded_in_prose_is_extracted(self):
        raw = "Sure! Here is the optimized resume:\n" + json.dumps(_payload()) + "\nLet me know if you need more."
        result = self.normalizer.normalize(raw, SAMPLE_RESUME)
        self.assertEqual(result.optimized_text, LONG_OPTIMIZED_TEXT)
        self.assertEqual(result.ats_score, 82)

    def test_snake_case_payload_is_accepted(self):
        payload = {
            "optimized_text": LONG_OPTIMIZED_TEXT,
            "ats_score": "77",
            "suggestions": [{"text": "Add metrics", "is_applied": True, "point_impact": 4}],
            "keyword_suggestions": [{"keyword": "GraphQL", "is_applied": "true"}],
        }
        result = self.normalizer.normalize(json.dumps(payload), SAMPLE_RESUME)
        self.assertEqual(result.ats_score, 77)
        self.assertTrue(result.suggestions[0].is_applied)
        self.assertEqual(result.suggestions[0].point_impact, 4)
        self.assertEqual(result.keywords[0].text, "GraphQL")
        self.assertTrue(result.keywords[0].is_applied)

    def test_missing_score_is_computed_from_text(self):
        payload = _payload(optimizedText=SAMPLE_RESUME)
        del payload["atsScore"]
        result = self.normalizer.normalize(json.dumps(payload), SAMPLE_RESUME)
        self.assertEqual(result.ats_score, heuristic_base_score(SAMPLE_RESUME))

    def test_long_plain_text_is_used_verbatim(self):
        result = self.normalizer.normalize(SAMPLE_RESUME, "original resume text that is not used here")
        self.assertEqual(result.optimized_text, SAMPLE_RESUME.strip())
        self.assertEqual(result.ats_score, heuristic_base_score(SAMPLE_RESUME.strip()))
        self.assertTrue(result.suggestions)
        self.assertTrue(result.keywords)

    def test_garbage_input_never_raises(self):
        samples = [
            "not json at all",
            "{ broken json",
            "[1, 2, 3]",
            "```\n```",
            "{\"suggestions\": \"nope\", \"keywords\": 42, \"atsScore\": null}",
            "{}",
            "\x00\x01",
        ]
        for raw in samples:
            with self.subTest(raw=raw):
                result = self.normalizer.normalize(raw, SAMPLE_RESUME)
                self._assert_invariants(result)
                self.assertEqual(result.optimized_text, SAMPLE_RESUME)
                self.assertTrue(result.suggestions)

    def test_duplicate_ids_are_replaced(self):
        suggestions = [{"id": "dup", "text": "First"}, {"id": "dup", "text": "Second"}]
        result = self.normalizer.normalize(json.dumps(_payload(suggestions=suggestions)), SAMPLE_RESUME)
        self.assertEqual([item.id for item in result.suggestions], ["dup", "s2"])

    def test_camel_case_item_keys_map_to_snake_case_fields(self):
        payload = _payload(
            suggestions=[{"id": "s1", "text": "Lead with impact", "isApplied": True, "pointImpact": 4}],
            keywords=[{"id": "k1", "text": "Terraform", "isApplied": "yes", "pointImpact": 2}],
        )
        result = self.normalizer.normalize(json.dumps(payload), SAMPLE_RESUME)
        suggestion = result.suggestions[0].model_dump()
        keyword = result.keywords[0].model_dump()
        self.assertEqual((suggestion["is_applied"], suggestion["point_impact"]), (True, 4))
        self.assertEqual((keyword["is_applied"], keyword["point_impact"]), (True, 2))
        self.assertNotIn("isApplied", suggestion)
        self.assertNotIn("pointImpact", keyword)

    def test_fallback_items_follow_request_language(self):
        result = self.normalizer.normalize("Le CV a été optimisé.", FRENCH_RESUME, language="fr")
        self.assertEqual(result.optimized_text, FRENCH_RESUME)
        self.assertEqual(result.language, "fr")
        self.assertEqual(result.suggestions[0].text, "Améliorez la structure globale avec des titres de section clairs")
        self.assertIn("Gestion de projet", [item.text for item in result.keywords])

    def test_generated_ids_skip_ids_already_taken(self):
        payload = _payload(
            suggestions=[{"id": "s2", "text": "A"}, {"text": "B"}, {"text": "C"}],
            keywords=[{"id": "k2", "text": "X"}, "Y"],
        )
        result = self.normalizer.normalize(json.dumps(payload), SAMPLE_RESUME)
        self.assertEqual([item.id for item in result.suggestions], ["s2", "s3", "s4"])
        self.assertEqual([item.id for item in result.keywords], ["k2", "k3"])

    def test_parse_reports_strategy(self):
        body = json.dumps({"optimizedText": "x"})
        self.assertEqual(self.normalizer.parse(body)[1], "direct")
        self.assertEqual(self.normalizer.parse(f"```json\n{body}\n```")[1], "direct")
        self.assertEqual(self.normalizer.parse(f"text {body} text")[1], "extracted")
        self.assertEqual(self.normalizer.parse("plain")[0], None)


if __name__ == "__main__":
    unittest.main()
