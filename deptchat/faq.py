import logging
from dataclasses import dataclass, field
from typing import List, Optional

logger = logging.getLogger(__name__)

FAQ_TABLE = "faqs"


@dataclass
class FaqRecord:
    question: str
    answer: str
    keywords: List[str] = field(default_factory=list)
    category: Optional[str] = None
    id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_row(cls, row):
        keywords = row.get("keywords") or []
        if isinstance(keywords, str):
            keywords = [keywords]
        return cls(
            question=row.get("question") or "",
            answer=row.get("answer") or "",
            keywords=[str(k) for k in keywords],
            category=row.get("category"),
            id=row.get("id"),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    def as_context(self):
        return f"Q: {self.question}\nA: {self.answer}\nKeywords: {', '.join(self.keywords)}"


class FaqRepository:
    """Reads the whole FAQ table. No filtering, ordering or paging."""

    def __init__(self, supabase):
        self.supabase = supabase

    def fetch_all(self):
        response = self.supabase.table(FAQ_TABLE).select("*").execute()
        rows = response.data or []
        return [FaqRecord.from_row(row) for row in rows]


def build_faq_context(faqs):
    return "\n\n".join(faq.as_context() for faq in faqs)
