"""
Insights Service - read-time analytics over all experiences.

Nothing is cached or precomputed: every call scans the experiences
collection. Experiences are read in insertion order so "first encountered"
tie-breaks are stable between calls.

PACKAGE PARSING:
    `package` is free text ("12 LPA", "$150k", "₹ 8.5 LPA"). Currency
    symbols and the LPA/USD/INR tokens are stripped and the leading number
    is read; anything that does not start with a number is ignored.

DIFFICULTY LEVEL:
    Inferred from the round name, first match wins:
    Easy -> Hard -> Medium keywords, default Medium.
"""

import math
import re
from collections import Counter
from decimal import Context, Decimal, ROUND_HALF_UP
from typing import Optional, List, Dict

from pymongo import ASCENDING

from placement_portal.services.experience_service import contains_ignore_case
from placement_portal.services.mongo_service import ExperienceStore

TOP_QUESTIONS = 10
TOP_PACKAGES = 10

# Evaluated in this order; the order is part of the output contract
LEVEL_RULES = [
    ("Easy", ("easy", "basic", "screening")),
    ("Hard", ("hard", "system design", "advanced", "final")),
    ("Medium", ("medium", "technical")),
]
DEFAULT_LEVEL = "Medium"

CURRENCY_SYMBOLS = re.compile(r"[$₹]")
CURRENCY_TOKENS = re.compile(r"LPA|USD|INR", re.IGNORECASE)
LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")

NATURAL_ORDER = [("_id", ASCENDING)]


def infer_level(round_name: Optional[str]) -> str:
    """Difficulty level from a round name (case-insensitive substring match)."""
    name = (round_name or "").lower()
    for level, keywords in LEVEL_RULES:
        if any(keyword in name for keyword in keywords):
            return level
    return DEFAULT_LEVEL


def parse_package(package) -> Optional[float]:
    """
    Best-effort number from a free-text package.

    >>> parse_package("₹12 LPA")
    12.0
    >>> parse_package("not a number") is None
    True
    """
    if package is None:
        return None
    text = CURRENCY_SYMBOLS.sub("", str(package))
    text = CURRENCY_TOKENS.sub("", text).strip()
    match = LEADING_NUMBER.match(text)
    if not match:
        return None
    return float(match.group(0))


def two_decimals(value: float) -> str:
    """Fixed two-decimal string; exact ties round away from zero."""
    if not math.isfinite(value) or abs(value) >= 1e21:
        return str(value)
    return str(Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP, context=Context(prec=60)))


def iter_questions(experiences: List[dict]):
    """Yield one tagged dict per question across all rounds."""
    for exp in experiences:
        for rnd in exp.get("rounds") or []:
            round_name = rnd.get("roundName") or ""
            for question in rnd.get("questions") or []:
                if not isinstance(question, str):
                    continue
                yield {
                    "question": question,
                    "company": exp.get("company"),
                    "role": exp.get("role"),
                    "roundNumber": rnd.get("roundNumber"),
                    "roundName": round_name,
                    "level": infer_level(round_name),
                    "year": exp.get("year"),
                }


class InsightsService:
    """
    Descriptive statistics for the insights page.
    """

    def __init__(self):
        self.experiences = ExperienceStore()

    def _packages(self, experiences: List[dict]) -> List[dict]:
        packages = []
        for exp in experiences:
            if not exp.get("package"):
                continue
            value = parse_package(exp["package"])
            if value is None:
                continue
            packages.append({
                "value": value,
                "company": exp.get("company"),
                "role": exp.get("role"),
                "year": exp.get("year"),
            })
        return packages

    def get_insights(self) -> dict:
        experiences = self.experiences.find(sort=NATURAL_ORDER)
        packages = self._packages(experiences)
        values = [p["value"] for p in packages]

        avg_package = sum(values) / len(values) if values else 0

        # Counter keeps first-seen order, and sorted() is stable, so equal
        # counts stay in first-encountered order
        question_counts = Counter(q["question"].lower() for q in iter_questions(experiences))
        frequent = sorted(question_counts.items(), key=lambda item: -item[1])[:TOP_QUESTIONS]

        company_distribution: Dict[str, int] = Counter(exp.get("company") for exp in experiences)
        year_distribution: Dict[str, int] = Counter(str(exp.get("year")) for exp in experiences)
        role_distribution: Dict[str, int] = Counter(exp.get("role") for exp in experiences)

        return {
            "overview": {
                "totalExperiences": len(experiences),
                "uniqueCompanies": len(company_distribution),
                "uniqueRoles": len(role_distribution),
                "avgPackage": two_decimals(avg_package),
                "maxPackage": max(values) if values else 0,
                "minPackage": min(values) if values else 0,
            },
            "frequentQuestions": [{"question": q, "count": c} for q, c in frequent],
            "companyDistribution": dict(company_distribution),
            "yearDistribution": dict(year_distribution),
            "roleDistribution": dict(role_distribution),
            "packageTrends": sorted(packages, key=lambda p: -p["value"])[:TOP_PACKAGES],
        }

    def search_questions(self, company: Optional[str] = None, role: Optional[str] = None) -> dict:
        """
        Tagged question list filtered by company and/or role substring.
        availableRoles feeds the role dropdown once a company is picked.
        """
        query = {}
        if company:
            query["company"] = contains_ignore_case(company)
        if role:
            query["role"] = contains_ignore_case(role)

        experiences = self.experiences.find(query, sort=NATURAL_ORDER)

        available_roles = []
        if company:
            roles = self.experiences.distinct("role", {"company": contains_ignore_case(company)})
            available_roles = sorted({r for r in roles if r})

        questions = list(iter_questions(experiences))
        return {
            "questions": questions,
            "total": len(questions),
            "availableRoles": available_roles,
        }


def get_insights_service() -> InsightsService:
    """Get insights service instance."""
    return InsightsService()
