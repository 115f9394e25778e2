"""Resume texts shared by the detector, aggregator and API tests."""

from __future__ import annotations

from typing import Any

AREAS = ("billing", "checkout", "search", "reporting", "invoicing", "onboarding")

SUMMARY_LINES = (
    "Backend engineer with 8 years of experience building payment and",
    "billing systems for high traffic products. Comfortable owning services",
    "from design through production support, mentoring engineers and",
    "working closely with product teams to ship reliable features quickly.",
)


def bullet_lines(count: int, start: int = 0, glyph: str = "•") -> list[str]:
    """Unique 10-word bullet lines, each under 70 characters with one percentage."""
    return [
        f"{glyph} Cut {AREAS[index % len(AREAS)]} latency {10 + index}% by redesigning core services and caching"
        for index in range(start, start + count)
    ]


def clean_resume(bullets_per_role: int = 18) -> str:
    lines = [
        "Jane Doe",
        "jane.doe@example.com | (555) 123-4567 | linkedin.com/in/janedoe",
        "",
        "PROFESSIONAL SUMMARY",
        *SUMMARY_LINES,
        "",
        "EXPERIENCE",
        "Senior Software Engineer, Acme Corp",
        "Jan 2020 - Present",
        *bullet_lines(bullets_per_role),
        "",
        "Software Engineer, Beta Inc",
        "Mar 2016 - Dec 2019",
        *bullet_lines(bullets_per_role, start=bullets_per_role),
        "",
        "EDUCATION",
        "B.S. Computer Science, State University, 2016",
        "",
        "SKILLS",
        "Python, Go, PostgreSQL, Kafka, Kubernetes, Terraform, AWS, Redis",
        "Saved $50K in annual hosting costs after consolidating clusters",
    ]
    return "\n".join(lines)


def filler_text(word_count: int, words_per_line: int = 10) -> str:
    words = ["word"] * word_count
    return "\n".join(" ".join(words[i : i + words_per_line]) for i in range(0, word_count, words_per_line))


def assessment_payload(
    *,
    overall: int = 90,
    format_score: int = 90,
    keyword_score: int = 90,
    contact_score: int = 90,
    content_score: int = 90,
    achievements: int = 3,
    quantifiable: bool = True,
    red_flags: list[str] | None = None,
    fixes: list[str] | None = None,
    improvements: list[str] | None = None,
) -> dict[str, Any]:
    return {
        "overall_assessment": {"ats_compatibility_score": overall, "summary": "Solid resume."},
        "format_analysis": {"score": format_score, "has_appropriate_structure": True, "issues": []},
        "keyword_analysis": {
            "score": keyword_score,
            "total_unique_keywords": 30,
            "industry_alignment": "high",
            "keyword_density": "good",
            "top_keywords": ["python", "kafka"],
        },
        "contact_information": {"score": contact_score, "email_found": True, "phone_found": True},
        "content_quality": {
            "score": content_score,
            "estimated_word_count": 450,
            "quantifiable_achievements": quantifiable,
            "achievement_examples": [{"example": f"Achievement {index}"} for index in range(achievements)],
            "uses_action_verbs": True,
        },
        "ats_red_flags": red_flags or [],
        "critical_fixes_required": fixes or [],
        "recommended_improvements": improvements or [],
    }
