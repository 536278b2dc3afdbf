# Resume texts shared by the test modules.

SAMPLE_RESUME = (
    "Jane Smith\n"
    "jane.smith@example.com | +1 555 123 4567 | linkedin.com/in/janesmith\n"
    "Summary\n"
    "Backend engineer with 6 years of experience building APIs.\n"
    "Experience\n"
    "- Cut infrastructure cost by 30%\n"
    "- Grew revenue by $200,000\n"
    "- Led a team of five engineers\n"
    "Education\n"
    "BSc Computer Science, State University\n"
    "Skills\n"
    "Python, Docker, AWS\n"
)

# No section markers, contact details, bullet glyphs or metrics.
PLAIN_TEXT = "plain text without any structure at all, just some words about a person who writes code"

LONG_OPTIMIZED_TEXT = ("Senior engineer. " * 15).strip()

FRENCH_RESUME = (
    "Marie Dupont\n"
    "Profil\n"
    "Ingénieure logiciel avec Python et Docker.\n"
    "Expérience\n"
    "- Gestion de projet pour Acme\n"
    "Compétences\n"
    "Python, Docker, Travail d'équipe\n"
)

SPANISH_RESUME = (
    "Carlos Ruiz\n"
    "Perfil\n"
    "Ingeniero de software con Python y Kubernetes.\n"
    "Experiencia\n"
    "- Gestión de proyectos en Globex\n"
    "Habilidades\n"
    "Python, Kubernetes, Trabajo en equipo\n"
)
