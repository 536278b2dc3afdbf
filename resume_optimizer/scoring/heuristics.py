from __future__ import annotations

import re

_BULLET_GLYPH_RE = re.compile(r"[•◦▪●■◆►*\-]")
_EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
# Candidate spans stay on one line; has_phone then checks digit count and year groups.
_PHONE_RE = re.compile(r"\+?\(?\d[\d \t().-]{7,}\d")
_DIGIT_GROUP_RE = re.compile(r"\d+")
_YEAR_RE = re.compile(r"(?:19|20)\d{2}")
PHONE_MIN_DIGITS = 10
PHONE_MAX_DIGITS = 15
_NETWORK_RE = re.compile(r"(?:linkedin\.com|github\.com|\blinkedin\b|\bgithub\b)", re.IGNORECASE)
_METRIC_RE = re.compile(
    r"(\d+(?:\.\d+)?\s?%|\$\s?\d[\d,]*(?:\.\d+)?|\b\d+\+?\s+years?\b)",
    re.IGNORECASE,
)
_SENTENCE_END_RE = re.compile(r"[.!?](?=\s|$)")
_WORD_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9+#.'/-]*")

# Ordered: the first four are the core sections counted toward the base score.
SECTION_MARKERS: dict[str, tuple[str, ...]] = {
    "experience": ("experience", "work history", "employment"),
    "education": ("education", "degree", "university"),
    "skills": ("skills", "competencies", "technologies"),
    "summary": ("summary", "profile", "objective"),
    "projects": ("projects",),
    "certifications": ("certification",),
    "languages": ("languages",),
}
CORE_SECTIONS = ("experience", "education", "skills", "summary")


def contains_any(text: str, markers: tuple[str, ...]) -> bool:
    lowered = text.lower()
    return any(marker in lowered for marker in markers)


def has_section(text: str, section_id: str) -> bool:
    return contains_any(text, SECTION_MARKERS.get(section_id, ()))


def present_sections(text: str) -> list[str]:
    return [section_id for section_id in SECTION_MARKERS if has_section(text, section_id)]


def has_email(text: str) -> bool:
    return bool(_EMAIL_RE.search(text))


def _looks_like_phone(candidate: str) -> bool:
    groups = _DIGIT_GROUP_RE.findall(candidate)
    digits = sum(len(group) for group in groups)
    if not PHONE_MIN_DIGITS <= digits <= PHONE_MAX_DIGITS:
        return False
    # date ranges such as "2015 - 2019 2020"
    return not all(_YEAR_RE.fullmatch(group) for group in groups)


def has_phone(text: str) -> bool:
    return any(_looks_like_phone(match.group(0)) for match in _PHONE_RE.finditer(text))


def has_network_link(text: str) -> bool:
    return bool(_NETWORK_RE.search(text))


def count_bullets(text: str) -> int:
    return len(_BULLET_GLYPH_RE.findall(text))


def count_metrics(text: str) -> int:
    return len(_METRIC_RE.findall(text))


def count_sentence_terminators(text: str) -> int:
    return len(_SENTENCE_END_RE.findall(text))


def count_words(text: str) -> int:
    return len(_WORD_RE.findall(text))


def _heading_section(line: str) -> str | None:
    stripped = re.sub(r"\s+", " ", line).strip().rstrip(":").strip()
    if not stripped or len(stripped.split()) > 5 or len(stripped) > 40:
        return None
    for section_id, markers in SECTION_MARKERS.items():
        if contains_any(stripped, markers):
            return section_id
    return None


def split_sections(text: str) -> dict[str, str]:
    """Map each section heading found in ``text`` to the body lines under it.

    A heading is a short line containing a section marker. Bodies of repeated
    headings for the same section are concatenated.
    """
    bodies: dict[str, list[str]] = {}
    current: str | None = None
    for line in text.splitlines():
        heading = _heading_section(line)
        if heading is not None:
            current = heading
            bodies.setdefault(current, [])
            continue
        if current is not None and line.strip():
            bodies[current].append(line.strip())
    return {section_id: "\n".join(lines) for section_id, lines in bodies.items()}
