import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.detectors.content import (  # noqa: E402
    NO_DATES_MESSAGE,
    PLACEHOLDER_MESSAGE,
    check_dates,
    check_name,
    check_summary,
    detect_sections,
)
from app.detectors.metrics import check_quantifiable_metrics  # noqa: E402


class DateDetectionTests(unittest.TestCase):
    def test_month_year_range_is_valid(self):
        signal = check_dates("Acme Corp\nJan 2020 - Present")
        self.assertTrue(signal.has_valid_dates)
        self.assertFalse(signal.has_placeholders)
        self.assertEqual(signal.date_count, 2)

    def test_placeholder_years_are_flagged(self):
        signal = check_dates("Acme Corp\n20XX - Present\nBeta Inc 2018 - 2019")
        self.assertTrue(signal.has_placeholders)
        self.assertEqual(signal.placeholder_count, 1)
        self.assertEqual(signal.message, PLACEHOLDER_MESSAGE)
        self.assertIn("placeholder", signal.message)

    def test_single_date_is_not_enough(self):
        signal = check_dates("Graduated 2019")
        self.assertFalse(signal.has_valid_dates)
        self.assertEqual(signal.message, NO_DATES_MESSAGE)


class NameDetectionTests(unittest.TestCase):
    def test_title_case_first_line(self):
        signal = check_name("Jane Doe\njane@example.com")
        self.assertTrue(signal.has_name)
        self.assertEqual(signal.name, "Jane Doe")

    def test_all_caps_name_with_middle_initial(self):
        signal = check_name("JANE Q. DOE\nSoftware Engineer")
        self.assertTrue(signal.has_name)
        self.assertEqual(signal.name, "JANE Q. DOE")

    def test_section_headers_are_not_names(self):
        signal = check_name("PROFESSIONAL EXPERIENCE\nbuilt services at several companies")
        self.assertFalse(signal.has_name)
        self.assertIsNone(signal.name)


class SummaryDetectionTests(unittest.TestCase):
    def test_summary_with_enough_content(self):
        text = "Summary\n" + " ".join(["experienced"] * 25)
        signal = check_summary(text)
        self.assertTrue(signal.has_summary)

    def test_bare_header_does_not_count(self):
        signal = check_summary("Objective\nGet hired.\n")
        self.assertFalse(signal.has_summary)
        self.assertEqual(signal.message, "Summary header found without enough content")

    def test_missing_header(self):
        self.assertFalse(check_summary("Experience\nAcme Corp").has_summary)


class SectionPresenceTests(unittest.TestCase):
    def test_detects_standard_sections(self):
        signal = detect_sections("Work Experience\nAcme\nEducation\nBSc\nTechnical Skills\nPython")
        self.assertTrue(signal.experience)
        self.assertTrue(signal.education)
        self.assertTrue(signal.skills)

    def test_missing_sections(self):
        signal = detect_sections("Jane Doe\nHobbies: chess")
        self.assertFalse(signal.experience or signal.education or signal.skills)


class MetricsDetectionTests(unittest.TestCase):
    def test_three_metrics_are_enough(self):
        signal = check_quantifiable_metrics("Grew revenue 30% and saved $50K over 3 years while leading a team")
        self.assertEqual(signal.metric_count, 3)
        self.assertTrue(signal.has_metrics)

    def test_multipliers_and_ranges(self):
        signal = check_quantifiable_metrics("Scaled throughput 4x and cut build time from 40 to 12 minutes")
        self.assertEqual(signal.metric_count, 2)
        self.assertFalse(signal.has_metrics)

    def test_plain_prose_has_none(self):
        self.assertEqual(check_quantifiable_metrics("Worked on many interesting things.").metric_count, 0)


if __name__ == "__main__":
    unittest.main()
