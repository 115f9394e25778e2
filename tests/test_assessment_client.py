import json
import os
import sys
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.schemas.ats import QualitativeAssessment  # noqa: E402
from app.services import assessment  # noqa: E402
from resume_samples import assessment_payload, clean_resume  # noqa: E402

ENABLED_ENV = {
    "ASSESSMENT_ENABLED": "1",
    "OPENAI_API_KEY": "sk-test-key",
    "ASSESSMENT_MAX_RETRIES": "1",
    "ASSESSMENT_RETRY_BACKOFF_S": "0",
}


def _completion(content):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _fake_client(*responses):
    client = MagicMock()
    client.chat.completions.create.side_effect = list(responses)
    return client


class AssessmentSettingsTests(unittest.TestCase):
    def test_disabled_flag_skips_the_request(self):
        with patch.dict(os.environ, {**ENABLED_ENV, "ASSESSMENT_ENABLED": "0"}):
            with patch.object(assessment, "_client") as client:
                self.assertIsNone(assessment.request_assessment(clean_resume()))
        client.assert_not_called()

    def test_placeholder_key_counts_as_unconfigured(self):
        with patch.dict(os.environ, {**ENABLED_ENV, "OPENAI_API_KEY": "your_openai_key"}):
            self.assertFalse(assessment.assessment_enabled())
        with patch.dict(os.environ, ENABLED_ENV):
            self.assertTrue(assessment.assessment_enabled())


class AssessmentRequestTests(unittest.TestCase):
    def test_successful_response_is_validated(self):
        client = _fake_client(_completion(json.dumps(assessment_payload(overall=82))))
        with patch.dict(os.environ, ENABLED_ENV), patch.object(assessment, "_client", return_value=client):
            result = assessment.request_assessment(clean_resume())

        self.assertIsInstance(result, QualitativeAssessment)
        self.assertEqual(result.overall_score, 82)
        kwargs = client.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs["response_format"], {"type": "json_object"})
        self.assertIn("Jane Doe", kwargs["messages"][0]["content"])

    def test_failed_attempt_is_retried_once(self):
        client = _fake_client(
            RuntimeError("upstream timeout"),
            _completion(json.dumps(assessment_payload(overall=64))),
        )
        with patch.dict(os.environ, ENABLED_ENV), patch.object(assessment, "_client", return_value=client):
            with patch.object(assessment.time, "sleep") as sleep:
                with self.assertLogs("app.services.assessment", level="WARNING") as logs:
                    result = assessment.request_assessment(clean_resume())

        self.assertEqual(result.overall_score, 64)
        self.assertEqual(client.chat.completions.create.call_count, 2)
        sleep.assert_called_once()
        self.assertTrue(any("assessment_request_failed attempt=1" in line for line in logs.output))

    def test_exhausted_retries_return_none(self):
        client = _fake_client(_completion("[1, 2, 3]"), _completion(""))
        with patch.dict(os.environ, ENABLED_ENV), patch.object(assessment, "_client", return_value=client):
            with patch.object(assessment.time, "sleep"):
                with self.assertLogs("app.services.assessment", level="WARNING") as logs:
                    self.assertIsNone(assessment.request_assessment(clean_resume()))
        self.assertEqual(client.chat.completions.create.call_count, 2)
        self.assertTrue(any("attempt=1" in line and "code=invalid_schema" in line for line in logs.output))
        self.assertTrue(any("attempt=2" in line and "code=empty_response" in line for line in logs.output))

    def test_invalid_json_returns_none(self):
        client = _fake_client(_completion("not json"), _completion("{still not json"))
        with patch.dict(os.environ, ENABLED_ENV), patch.object(assessment, "_client", return_value=client):
            with patch.object(assessment.time, "sleep"):
                self.assertIsNone(assessment.request_assessment(clean_resume()))


class PromptTests(unittest.TestCase):
    def test_long_text_is_truncated_with_marker(self):
        self.assertEqual(assessment.truncate_resume_text("abcdef", 3), "abc" + assessment.TRUNCATION_MARKER)
        self.assertEqual(assessment.truncate_resume_text("abc", 3), "abc")

    def test_prompt_embeds_resume_text(self):
        prompt = assessment.build_prompt("Jane Doe resume body", 8000)
        self.assertIn("Jane Doe resume body", prompt)
        self.assertNotIn(assessment.RESUME_PLACEHOLDER, prompt)


class LenientAssessmentTests(unittest.TestCase):
    def test_malformed_fields_are_coerced(self):
        result = QualitativeAssessment.model_validate(
            {
                "overall_assessment": {"ats_compatibility_score": "87.6"},
                "format_analysis": {"score": 140, "has_appropriate_structure": "no"},
                "keyword_analysis": "unexpected",
                "content_quality": {
                    "score": None,
                    "quantifiable_achievements": "yes",
                    "achievement_examples": ["Grew revenue 20%", {"example": ""}, 7],
                },
                "ats_red_flags": [{"issue": "Header graphics"}, "", None],
                "recommended_improvements": "rewrite everything",
            }
        )
        self.assertEqual(result.overall_score, 88)
        self.assertEqual(result.format_analysis.score, 100)
        self.assertFalse(result.format_analysis.has_appropriate_structure)
        self.assertEqual(result.keyword_analysis.score, 0)
        self.assertEqual(result.content_quality.score, 0)
        self.assertTrue(result.content_quality.quantifiable_achievements)
        self.assertEqual(result.achievement_count, 2)
        self.assertEqual(result.ats_red_flags, ["Header graphics"])
        self.assertEqual(result.recommended_improvements, [])

    def test_infinite_numbers_zero_only_their_field(self):
        payload = assessment_payload(overall=75)
        payload["format_analysis"]["score"] = float("inf")
        payload["keyword_analysis"]["total_unique_keywords"] = float("-inf")
        result = QualitativeAssessment.model_validate(payload)
        self.assertEqual(result.format_analysis.score, 0)
        self.assertEqual(result.keyword_analysis.total_unique_keywords, 0)
        self.assertEqual(result.overall_score, 75)

    def test_infinite_score_in_response_keeps_the_assessment(self):
        body = json.dumps(assessment_payload(overall=70)).replace('"score": 90', '"score": 1e999', 1)
        client = _fake_client(_completion(body))
        with patch.dict(os.environ, ENABLED_ENV), patch.object(assessment, "_client", return_value=client):
            result = assessment.request_assessment(clean_resume())
        self.assertIsNotNone(result)
        self.assertEqual(result.format_analysis.score, 0)
        self.assertEqual(client.chat.completions.create.call_count, 1)


if __name__ == "__main__":
    unittest.main()
