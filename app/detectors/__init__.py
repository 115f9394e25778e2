from .bullets import BulletRules, count_bullet_points, load_bullet_rules
from .contact import check_contact_location
from .content import check_dates, check_name, check_summary, detect_sections
from .layout import check_text_extractability, detect_multi_column_layout, detect_tables
from .length import detect_experience_level, verify_document_length
from .metrics import check_quantifiable_metrics
from .text_utils import PageCounter

__all__ = [
    "PageCounter",
    "check_text_extractability",
    "detect_tables",
    "detect_multi_column_layout",
    "verify_document_length",
    "detect_experience_level",
    "check_contact_location",
    "check_dates",
    "check_name",
    "check_summary",
    "detect_sections",
    "BulletRules",
    "load_bullet_rules",
    "count_bullet_points",
    "check_quantifiable_metrics",
]
