import json
import logging
from dataclasses import dataclass, field
from typing import Dict, List

logger = logging.getLogger(__name__)


@dataclass
class DepartmentProfile:
    department: str = "Department of Computer Science"
    institution: str = "Kaduna Polytechnic"
    programs: List[str] = field(default_factory=list)
    class_venues: Dict[str, str] = field(default_factory=dict)
    staff: List[str] = field(default_factory=list)

    @classmethod
    def load(cls, path):
        """Load the static department facts from a JSON file"""
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.warning("⚠️ Department profile %s not found, using defaults", path)
            return cls()

        return cls(
            department=data.get("department", cls.department),
            institution=data.get("institution", cls.institution),
            programs=list(data.get("programs", [])),
            class_venues=dict(data.get("class_venues", {})),
            staff=list(data.get("staff", [])),
        )


GUIDELINES = """Guidelines:
1. Always be helpful, professional, and friendly
2. Provide accurate information based on the FAQ data when available
3. If you don't have specific information, acknowledge this and suggest contacting the department directly
4. Focus on Computer Science department-related topics
5. Be encouraging and supportive to students
6. Keep responses concise but informative
7. Use a warm, welcoming tone appropriate for an educational institution"""

CLOSING = ("When answering questions, prioritize information from the FAQ database above. "
           "If the question isn't covered in the FAQs, provide general helpful guidance while "
           "noting that specific details should be confirmed with the department.")


def _department_facts(profile):
    sections = []

    if profile.programs:
        sections.append("Programs offered:\n" + "\n".join(f"- {p}" for p in profile.programs))

    if profile.class_venues:
        venues = "\n".join(f"- {cls}: {venue}" for cls, venue in profile.class_venues.items())
        sections.append("Class venues:\n" + venues)

    if profile.staff:
        sections.append("Department staff:\n" + "\n".join(f"- {name}" for name in profile.staff))

    return "\n\n".join(sections)


def build_system_prompt(profile, faq_context):
    prompt = (
        f"You are an AI assistant for the {profile.department} at {profile.institution}. "
        "Your role is to help students, prospective students, and visitors with information "
        "about the department.\n\n"
        "Here is the official FAQ information for the department:\n\n"
        f"{faq_context}\n\n"
    )

    facts = _department_facts(profile)
    if facts:
        prompt += f"Additional department facts:\n\n{facts}\n\n"

    return prompt + GUIDELINES + "\n\n" + CLOSING


def build_prompt_text(system_prompt, message):
    """System prompt and user message go out as a single text part."""
    return f"{system_prompt}\n\nUser: {message}"
