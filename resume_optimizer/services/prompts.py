from __future__ import annotations

from typing import Sequence

from resume_optimizer.ai.types import PromptPair
from resume_optimizer.schemas.optimization import Suggestion

_LANGUAGE_NAMES = {
    "en": "English",
    "de": "German",
    "fr": "French",
    "es": "Spanish",
    "it": "Italian",
    "nl": "Dutch",
    "pt": "Portuguese",
}

_ATS_REMINDERS = (
    "ATS OPTIMIZATION REMINDERS:\n"
    "- Use standard section headings (Summary, Experience, Education, Skills)\n"
    "- Keep contact information at the top\n"
    "- Use bullet points for accomplishments and responsibilities\n"
    "- Quantify achievements with metrics when possible\n"
    "- Avoid tables, graphics and complex formatting"
)

_OUTPUT_SCHEMA = (
    "Return JSON schema:\n"
    "{"
    "\"optimizedText\":\"...\","
    "\"atsScore\":0,"
    "\"suggestions\":[{\"id\":\"s1\",\"type\":\"structure|content|skills|summary|formatting\","
    "\"text\":\"...\",\"impact\":\"...\",\"pointImpact\":2}],"
    "\"keywords\":[{\"id\":\"k1\",\"text\":\"...\",\"relevance\":0.8,\"pointImpact\":1}],"
    "\"improvements\":[\"...\"]"
    "}\n"
    "Keep 3-5 suggestions and 5-10 keywords. atsScore is an integer between 0 and 100.\n"
    "Do not add explanatory text or code fences outside the JSON object."
)


def language_name(language: str | None) -> str:
    code = (language or "en").strip()
    return _LANGUAGE_NAMES.get(code.lower()[:2], code or "English")


class PromptBuilder:
    def build_optimization(self, resume_text: str, language: str | None = None) -> PromptPair:
        lang = language_name(language)
        system = (
            "You are an expert resume writer and ATS (applicant tracking system) specialist. "
            "Rewrite resumes so they parse cleanly and rank well while staying truthful to the candidate. "
            "Never invent employers, dates, degrees or numbers that are not in the input. "
            f"Write the resume, the suggestions and the keywords in {lang}. "
            "Return strict JSON only."
        )
        user = (
            "TASK: Optimize the following resume for ATS systems.\n\n"
            f"{_ATS_REMINDERS}\n\n"
            f"{_OUTPUT_SCHEMA}\n\n"
            f"RESUME:\n{resume_text}"
        )
        return PromptPair(system_prompt=system, user_prompt=user)

    def build_reoptimization(
        self,
        resume_text: str,
        applied_suggestions: Sequence[Suggestion | str] = (),
        applied_keywords: Sequence[str] = (),
        language: str | None = None,
    ) -> PromptPair:
        lang = language_name(language)
        system = (
            "You are an expert resume optimizer. You take an existing resume and a set of improvement "
            "suggestions and keywords selected by the user, and produce an improved version that integrates "
            "them naturally while keeping the original structure and voice. "
            f"Write the resume, the suggestions and the keywords in {lang}. "
            "Return strict JSON only."
        )

        lines = ["TASK: Reoptimize the following resume using the selected suggestions and keywords.", ""]
        if applied_suggestions:
            lines.append("SELECTED SUGGESTIONS TO INCORPORATE:")
            for index, item in enumerate(applied_suggestions, start=1):
                if isinstance(item, Suggestion):
                    lines.append(f"{index}. [{item.type.upper()}] {item.text}")
                    if item.impact:
                        lines.append(f"   Impact: {item.impact}")
                else:
                    lines.append(f"{index}. {item}")
        else:
            lines.append("No specific suggestions selected. Focus on general improvement and keyword integration.")
        lines.append("")

        keywords = [str(keyword).strip() for keyword in applied_keywords if str(keyword).strip()]
        if keywords:
            lines.append("SELECTED KEYWORDS TO INCORPORATE:")
            for start in range(0, len(keywords), 5):
                lines.append("- " + ", ".join(keywords[start : start + 5]))
        else:
            lines.append("No specific keywords selected. Focus on suggestion integration and general improvement.")

        user = (
            "\n".join(lines)
            + f"\n\n{_ATS_REMINDERS}\n\n{_OUTPUT_SCHEMA}\n\n"
            + f"RESUME TO REOPTIMIZE:\n{resume_text}"
        )
        return PromptPair(system_prompt=system, user_prompt=user)
