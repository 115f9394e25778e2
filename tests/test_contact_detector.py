import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.detectors.contact import check_contact_location  # noqa: E402
from resume_samples import filler_text  # noqa: E402


class ContactLocationTests(unittest.TestCase):
    def test_contact_at_the_top(self):
        signal = check_contact_location("Jane Doe\njane@example.com\n(555) 123-4567\nlinkedin.com/in/janedoe")
        self.assertTrue(signal.email_in_first_300)
        self.assertTrue(signal.phone_in_first_300)
        self.assertTrue(signal.email_in_acceptable_area)
        self.assertEqual(signal.email_position, 9)
        self.assertTrue(signal.linkedin_exists)
        self.assertFalse(signal.github_exists)
        self.assertFalse(signal.may_be_in_pdf_header)

    def test_missing_contact(self):
        signal = check_contact_location("Jane Doe\nNothing to reach me by here.")
        self.assertTrue(signal.contact_missing)
        self.assertIsNone(signal.email_position)

    def test_contact_buried_at_the_bottom(self):
        text = "Jane Doe\n" + filler_text(100) + "\njane@example.com\ngithub.com/janedoe"
        signal = check_contact_location(text)
        self.assertTrue(signal.email_exists)
        self.assertFalse(signal.email_in_acceptable_area)
        self.assertFalse(signal.phone_exists)
        self.assertTrue(signal.github_exists)

    def test_contact_after_a_long_first_line_may_be_a_header(self):
        text = ("Objective " * 40).strip() + "\njane@example.com"
        signal = check_contact_location(text)
        self.assertFalse(signal.email_in_first_300)
        self.assertTrue(signal.email_in_first_10_lines)
        self.assertTrue(signal.may_be_in_pdf_header)

    def test_international_phone_layout(self):
        signal = check_contact_location("Ana Ruiz\n+52 (55) 1234 5678")
        self.assertTrue(signal.phone_exists)
        self.assertTrue(signal.phone_in_acceptable_area)


if __name__ == "__main__":
    unittest.main()
