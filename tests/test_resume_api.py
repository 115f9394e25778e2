import os
import sys
import unittest
from io import BytesIO
from pathlib import Path
from dataclasses import replace
from unittest.mock import patch

from docx import Document

# Keep API tests deterministic and offline by default.
os.environ.setdefault("ASSESSMENT_ENABLED", "0")
os.environ.setdefault("RATE_LIMIT_ENABLED", "0")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from fastapi.testclient import TestClient  # noqa: E402

from app.core import cors  # noqa: E402
from app.core.config import settings  # noqa: E402
from app.core.rate_limit import limiter  # noqa: E402
from app.main import app  # noqa: E402
from app.parsing.models import DOCX_MIME_TYPE  # noqa: E402
from resume_samples import clean_resume  # noqa: E402


def _docx_upload(text):
    document = Document()
    for line in text.splitlines():
        document.add_paragraph(line)
    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()


class ResumeApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        limiter.enabled = False
        cls.client = TestClient(app)

    def setUp(self):
        env = patch.dict(os.environ, {"ASSESSMENT_ENABLED": "0"})
        env.start()
        self.addCleanup(env.stop)

    def test_health_reports_assessment_state(self):
        response = self.client.get("/v1/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy", "assessment": "disabled"})

    def test_analyze_text_without_assessment(self):
        response = self.client.post("/v1/resume/analyze-text", json={"text": clean_resume()})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["assessment_unavailable"])
        self.assertEqual(body["overall_score"], min(100, body["parseability_score"] + 20))
        self.assertEqual(body["critical_issues"], [])
        self.assertEqual(body["confidence"], "medium")

    def test_analyze_text_never_reads_the_named_file(self):
        payload = {"text": "Jane Doe resume", "mime_type": "application/pdf", "file_name": "/etc/hosts"}
        with self.assertLogs("app.detectors.layout", level="WARNING") as logs:
            response = self.client.post("/v1/resume/analyze-text", json=payload)
        self.assertEqual(response.status_code, 200)
        self.assertTrue(any("No document available" in line for line in logs.output))
        self.assertFalse(any("scanned" in issue.lower() for issue in response.json()["critical_issues"]))

    def test_analyze_text_rejects_blank_text(self):
        response = self.client.post("/v1/resume/analyze-text", json={"text": "   "})
        self.assertEqual(response.status_code, 400)

    def test_upload_requires_a_file(self):
        response = self.client.post("/v1/resume/analyze", data={"note": "no file"})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "Please select a resume file to upload.")

    def test_upload_rejects_other_extensions(self):
        files = {"resume": ("resume.txt", b"Jane Doe", "text/plain")}
        response = self.client.post("/v1/resume/analyze", files=files)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "The resume must be a PDF or DOCX file.")

    def test_upload_rejects_mismatched_signature(self):
        files = {"resume": ("resume.pdf", b"definitely not a pdf", "application/pdf")}
        response = self.client.post("/v1/resume/analyze", files=files)
        self.assertEqual(response.status_code, 400)
        self.assertIn("signature", response.json()["detail"])

    def test_upload_rejects_oversized_files(self):
        content = b"%PDF-" + b"0" * settings.max_upload_bytes
        files = {"resume": ("resume.pdf", content, "application/pdf")}
        response = self.client.post("/v1/resume/analyze", files=files)
        self.assertEqual(response.status_code, 413)

    def test_docx_upload_is_analyzed(self):
        files = {"resume": ("resume.docx", _docx_upload(clean_resume()), DOCX_MIME_TYPE)}
        response = self.client.post("/v1/resume/analyze", files=files)
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertTrue(body["assessment_unavailable"])
        self.assertGreater(body["parseability_score"], 0)
        self.assertIn(body["confidence"], {"high", "medium", "low"})

    def test_startup_loads_calibration_table(self):
        with self.assertLogs("app.core.lifespan", level="INFO") as logs:
            with TestClient(app) as client:
                self.assertEqual(client.get("/v1/health").status_code, 200)
        self.assertTrue(any("scoring_config_loaded" in line for line in logs.output))


class CorsOriginTests(unittest.TestCase):
    def test_origins_are_normalised(self):
        configured = replace(
            settings,
            cors_allowed_origins=("https://app.example.com/", "*", "https://app.example.com", " http://localhost:3000 "),
        )
        with patch.object(cors, "settings", configured):
            self.assertEqual(
                cors.cors_allowed_origins(),
                ["https://app.example.com", "http://localhost:3000"],
            )


if __name__ == "__main__":
    unittest.main()
