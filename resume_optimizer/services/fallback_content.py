from __future__ import annotations

import re
from dataclasses import dataclass

from resume_optimizer.scoring import heuristics
from resume_optimizer.schemas.optimization import Keyword, Suggestion

from .prompts import language_name

MAX_SUGGESTIONS = 5
MAX_KEYWORDS = 10
MIN_SENTENCES_FOR_DETAIL = 10
DEFAULT_LANGUAGE = "English"


@dataclass(frozen=True)
class LocalizedContent:
    base: tuple[dict[str, str], ...]
    summary: dict[str, str]
    detail: dict[str, str]
    summary_markers: tuple[str, ...]
    vocabulary: tuple[str, ...]


_ENGLISH = LocalizedContent(
    base=(
        {
            "type": "structure",
            "text": "Improve the overall structure with clear section headings",
            "impact": "Makes your resume easier to scan for recruiters and parsers",
        },
        {
            "type": "content",
            "text": "Use more action verbs and quantify achievements",
            "impact": "Makes accomplishments more impactful and demonstrates measurable results",
        },
        {
            "type": "skills",
            "text": "Create a dedicated skills section with relevant keywords",
            "impact": "Improves ATS compatibility and showcases your core competencies",
        },
    ),
    summary={
        "type": "summary",
        "text": "Add a professional summary at the top of your resume",
        "impact": "Gives recruiters a quick overview of your profile and target role",
    },
    detail={
        "type": "content",
        "text": "Expand descriptions of your experiences with more details",
        "impact": "Gives employers a better understanding of your capabilities and achievements",
    },
    summary_markers=("summary", "profile"),
    vocabulary=(
        # technical
        "JavaScript",
        "Python",
        "React",
        "Node.js",
        "AWS",
        "Cloud",
        "DevOps",
        "Docker",
        "Kubernetes",
        "Agile",
        "Scrum",
        "Machine Learning",
        "Data Analysis",
        "SQL",
        # business
        "Project Management",
        "Leadership",
        "Strategy",
        "Marketing",
        "Sales",
        "Customer Service",
        "Business Development",
        # soft skills
        "Communication",
        "Teamwork",
        "Problem-solving",
        "Collaboration",
    ),
)

_FRENCH = LocalizedContent(
    base=(
        {
            "type": "structure",
            "text": "Améliorez la structure globale avec des titres de section clairs",
            "impact": "Rend votre CV plus facile à parcourir pour les recruteurs et les logiciels ATS",
        },
        {
            "type": "content",
            "text": "Utilisez plus de verbes d'action et quantifiez vos réalisations",
            "impact": "Rend vos accomplissements plus percutants et démontre des résultats mesurables",
        },
        {
            "type": "skills",
            "text": "Créez une section de compétences dédiée avec des mots-clés pertinents",
            "impact": "Améliore la compatibilité ATS et met en valeur vos compétences essentielles",
        },
    ),
    summary={
        "type": "summary",
        "text": "Ajoutez un résumé professionnel en haut de votre CV",
        "impact": "Donne aux recruteurs un aperçu rapide de votre profil et du poste visé",
    },
    detail={
        "type": "content",
        "text": "Développez les descriptions de vos expériences avec plus de détails",
        "impact": "Donne aux employeurs une meilleure compréhension de vos capacités et réalisations",
    },
    summary_markers=("résumé", "profil", "summary"),
    vocabulary=(
        "JavaScript",
        "Python",
        "React",
        "Node.js",
        "AWS",
        "Cloud",
        "DevOps",
        "Docker",
        "Kubernetes",
        "Agile",
        "Scrum",
        "Machine Learning",
        "Analyse de données",
        "SQL",
        "Gestion de projet",
        "Leadership",
        "Stratégie",
        "Marketing",
        "Ventes",
        "Service client",
        "Développement commercial",
        "Communication",
        "Travail d'équipe",
        "Résolution de problèmes",
        "Collaboration",
    ),
)

_SPANISH = LocalizedContent(
    base=(
        {
            "type": "structure",
            "text": "Mejore la estructura general con encabezados de sección claros",
            "impact": "Hace que su currículum sea más fácil de revisar para reclutadores y sistemas ATS",
        },
        {
            "type": "content",
            "text": "Utilice más verbos de acción y cuantifique sus logros",
            "impact": "Hace que los logros sean más impactantes y demuestra resultados medibles",
        },
        {
            "type": "skills",
            "text": "Cree una sección de habilidades dedicada con palabras clave relevantes",
            "impact": "Mejora la compatibilidad con ATS y muestra sus competencias principales",
        },
    ),
    summary={
        "type": "summary",
        "text": "Agregue un resumen profesional al inicio de su currículum",
        "impact": "Ofrece a los reclutadores una visión rápida de su perfil y del puesto buscado",
    },
    detail={
        "type": "content",
        "text": "Amplíe las descripciones de sus experiencias con más detalles",
        "impact": "Proporciona a los empleadores una mejor comprensión de sus capacidades y logros",
    },
    summary_markers=("resumen", "perfil", "summary"),
    vocabulary=(
        "JavaScript",
        "Python",
        "React",
        "Node.js",
        "AWS",
        "Cloud",
        "DevOps",
        "Docker",
        "Kubernetes",
        "Agile",
        "Scrum",
        "Machine Learning",
        "Análisis de datos",
        "SQL",
        "Gestión de proyectos",
        "Liderazgo",
        "Estrategia",
        "Marketing",
        "Ventas",
        "Servicio al cliente",
        "Desarrollo de negocios",
        "Comunicación",
        "Trabajo en equipo",
        "Resolución de problemas",
        "Colaboración",
    ),
)

LOCALIZED_CONTENT: dict[str, LocalizedContent] = {
    "English": _ENGLISH,
    "French": _FRENCH,
    "Spanish": _SPANISH,
}

_CAPITALIZED_RE = re.compile(r"\b[A-ZÀ-ÖØ-Þ][A-Za-z0-9À-ÖØ-öø-ÿ]+\b")
_STOP_WORDS = {
    "the",
    "and",
    "for",
    "with",
    "from",
    "this",
    "that",
    "our",
    "your",
    "summary",
    "profile",
    "experience",
    "education",
    "skills",
    "projects",
    "references",
    # fr
    "les",
    "des",
    "pour",
    "avec",
    "profil",
    "résumé",
    "expérience",
    "expériences",
    "formation",
    "compétences",
    "projets",
    # es
    "los",
    "las",
    "para",
    "con",
    "perfil",
    "resumen",
    "experiencia",
    "educación",
    "formación",
    "habilidades",
    "proyectos",
}


def localized_content(language: str | None) -> LocalizedContent:
    return LOCALIZED_CONTENT.get(language_name(language), LOCALIZED_CONTENT[DEFAULT_LANGUAGE])


class FallbackContentGenerator:
    """Deterministic suggestions and keywords derived from resume text alone.

    English, French and Spanish carry their own suggestion texts and keyword
    vocabularies; any other language gets the English set.
    """

    def suggestions(self, text: str, language: str | None = None) -> list[Suggestion]:
        content = text or ""
        local = localized_content(language)
        raw = list(local.base)
        if not heuristics.contains_any(content, local.summary_markers):
            raw.append(local.summary)
        if heuristics.count_sentence_terminators(content) < MIN_SENTENCES_FOR_DETAIL:
            raw.append(local.detail)
        return [
            Suggestion(id=f"s{index}", **item)
            for index, item in enumerate(raw[:MAX_SUGGESTIONS], start=1)
        ]

    def keywords(self, text: str, language: str | None = None) -> list[Keyword]:
        vocabulary = localized_content(language).vocabulary
        terms = self.keyword_terms(text, language)
        curated = {term.lower() for term in vocabulary}
        return [
            Keyword(
                id=f"k{index}",
                text=term,
                relevance=0.8 if term.lower() in curated else 0.5,
            )
            for index, term in enumerate(terms, start=1)
        ]

    def keyword_terms(self, text: str, language: str | None = None) -> list[str]:
        content = text or ""
        lowered = content.lower()
        vocabulary = localized_content(language).vocabulary
        matched = [term for term in vocabulary if term.lower() in lowered]
        matched_words = {word for term in matched for word in re.split(r"[\s.-]+", term.lower()) if word}

        seen: set[str] = set()
        terms: list[str] = []
        for term in matched:
            key = term.lower()
            if key not in seen:
                seen.add(key)
                terms.append(term)

        for token in _CAPITALIZED_RE.findall(content):
            key = token.lower()
            if len(token) < 3 or key in _STOP_WORDS or key in seen or key in matched_words:
                continue
            seen.add(key)
            terms.append(token)

        return terms[:MAX_KEYWORDS]
