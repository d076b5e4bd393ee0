"""Tender Ranker — Data Models.

Dataclasses for the two input records (Solicitation, Proposal) and the
ranking output (FactorScores, RankedProposal).

Each dataclass includes:
  - to_dict(): converts to a plain dict (JSON friendly)
  - from_dict(data): classmethod to build from a loaded record; missing
    optional keys become empty strings/lists and camelCase record keys
    (proposedBudget, minimumBudget, ...) are accepted as aliases
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from tender_ranker.utils.logger import get_logger

logger = get_logger(__name__)


# ═══════════════════════════════════════════════════════════
# Field coercion helpers
# ═══════════════════════════════════════════════════════════


def _pick(data: dict[str, Any], *keys: str, default: Any = "") -> Any:
    """Return the first present, non-None value among several key aliases."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return default


def _to_str(value: Any) -> str:
    """Coerce a value to str; None becomes ''."""
    if value is None:
        return ""
    return str(value)


def _to_list(value: Any) -> list[str]:
    """Coerce a value to a list of strings.

    Handles: list/tuple, str (wraps in list), None (empty list).
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    if isinstance(value, str):
        return [value] if value.strip() else []
    return []


def _to_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp; returns None when absent or unparseable."""
    if value is None or isinstance(value, datetime):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("Ignoring unparseable timestamp: %r", text)
        return None


# ═══════════════════════════════════════════════════════════
# Input Models
# ═══════════════════════════════════════════════════════════


@dataclass
class Solicitation:
    """The request for proposals being bid on.

    Only category and the two budget bounds feed the scorer; the rest is
    carried for display.

    Attributes:
        solicitation_id: Unique identifier.
        title: Solicitation title.
        category: Free-text category (e.g. "IT Services", "Procurement").
        location: Free-text location.
        deadline: Free-text deadline, format not guaranteed.
        minimum_budget: Lower budget bound as a lax decimal string.
        maximum_budget: Upper budget bound as a lax decimal string.
        description: Project description.
        requirements: Requirements text.
        status: 'Active', 'Closed', 'Draft' or 'Pending'.
    """

    solicitation_id: str = ""
    title: str = ""
    category: str = ""
    location: str = ""
    deadline: str = ""
    minimum_budget: str = ""
    maximum_budget: str = ""
    description: str = ""
    requirements: str = ""
    status: str = "Active"

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary.

        Returns:
            Dict with snake_case field names as keys.
        """
        return {
            "solicitation_id": self.solicitation_id,
            "title": self.title,
            "category": self.category,
            "location": self.location,
            "deadline": self.deadline,
            "minimum_budget": self.minimum_budget,
            "maximum_budget": self.maximum_budget,
            "description": self.description,
            "requirements": self.requirements,
            "status": self.status,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Solicitation":
        """Construct a Solicitation from a record dictionary.

        Args:
            data: Dictionary with snake_case or camelCase keys.

        Returns:
            A Solicitation instance.
        """
        return cls(
            solicitation_id=_to_str(_pick(data, "solicitation_id", "id", "tenderId")),
            title=_to_str(_pick(data, "title")),
            category=_to_str(_pick(data, "category")),
            location=_to_str(_pick(data, "location")),
            deadline=_to_str(_pick(data, "deadline")),
            minimum_budget=_to_str(_pick(data, "minimum_budget", "minimumBudget")),
            maximum_budget=_to_str(_pick(data, "maximum_budget", "maximumBudget")),
            description=_to_str(_pick(data, "description", "projectDescription")),
            requirements=_to_str(_pick(data, "requirements")),
            status=_to_str(_pick(data, "status", default="Active")),
        )


@dataclass
class Proposal:
    """One vendor's bid against a solicitation.

    Attributes:
        proposal_id: Unique identifier.
        solicitation_id: The solicitation this bid targets.
        vendor_name: Submitter's name (not scored).
        vendor_email: Submitter's account email (not scored).
        company_name: Bidding company.
        contact_person: Named contact for the bid.
        email: Contact email as typed, not validated.
        phone: Contact phone, may be empty.
        title: Proposal title.
        proposed_budget: Bid amount as a lax decimal string.
        timeline: Free-text delivery estimate (e.g. "3 months").
        description: Proposal body.
        experience: Experience narrative.
        attachments: Attachment file names.
        status: 'Pending', 'Accepted' or 'Rejected'.
        date_submitted: Submission time, used only for the optional tie-break.
    """

    proposal_id: str = ""
    solicitation_id: str = ""
    vendor_name: str = ""
    vendor_email: str = ""
    company_name: str = ""
    contact_person: str = ""
    email: str = ""
    phone: str = ""
    title: str = ""
    proposed_budget: str = ""
    timeline: str = ""
    description: str = ""
    experience: str = ""
    attachments: list[str] = field(default_factory=list)
    status: str = "Pending"
    date_submitted: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary.

        The submission timestamp is serialized as ISO-8601.

        Returns:
            Dict with snake_case field names as keys.
        """
        return {
            "proposal_id": self.proposal_id,
            "solicitation_id": self.solicitation_id,
            "vendor_name": self.vendor_name,
            "vendor_email": self.vendor_email,
            "company_name": self.company_name,
            "contact_person": self.contact_person,
            "email": self.email,
            "phone": self.phone,
            "title": self.title,
            "proposed_budget": self.proposed_budget,
            "timeline": self.timeline,
            "description": self.description,
            "experience": self.experience,
            "attachments": list(self.attachments),
            "status": self.status,
            "date_submitted": (
                self.date_submitted.isoformat() if self.date_submitted else None
            ),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Proposal":
        """Construct a Proposal from a record dictionary.

        Args:
            data: Dictionary with snake_case or camelCase keys.

        Returns:
            A Proposal instance.
        """
        return cls(
            proposal_id=_to_str(_pick(data, "proposal_id", "id")),
            solicitation_id=_to_str(_pick(data, "solicitation_id", "tenderId")),
            vendor_name=_to_str(_pick(data, "vendor_name", "vendorName")),
            vendor_email=_to_str(_pick(data, "vendor_email", "vendorEmail")),
            company_name=_to_str(_pick(data, "company_name", "companyName")),
            contact_person=_to_str(_pick(data, "contact_person", "contactPerson")),
            email=_to_str(_pick(data, "email")),
            phone=_to_str(_pick(data, "phone")),
            title=_to_str(_pick(data, "title", "proposalTitle")),
            proposed_budget=_to_str(_pick(data, "proposed_budget", "proposedBudget")),
            timeline=_to_str(_pick(data, "timeline")),
            description=_to_str(_pick(data, "description", "proposalDescription")),
            experience=_to_str(_pick(data, "experience")),
            attachments=_to_list(_pick(data, "attachments", default=None)),
            status=_to_str(_pick(data, "status", default="Pending")),
            date_submitted=_to_datetime(
                _pick(data, "date_submitted", "dateSubmitted", default=None)
            ),
        )


# ═══════════════════════════════════════════════════════════
# Output Models
# ═══════════════════════════════════════════════════════════


@dataclass(frozen=True)
class FactorScores:
    """The six independent factor scores of one proposal, each 0-100."""

    budget: float
    reputation: float
    technical: float
    quality: float
    timeline: float
    communication: float

    def to_dict(self) -> dict[str, float]:
        return {
            "budget": self.budget,
            "reputation": self.reputation,
            "technical": self.technical,
            "quality": self.quality,
            "timeline": self.timeline,
            "communication": self.communication,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FactorScores":
        """Construct from a to_dict() mapping. Every factor is required."""
        return cls(
            budget=float(data["budget"]),
            reputation=float(data["reputation"]),
            technical=float(data["technical"]),
            quality=float(data["quality"]),
            timeline=float(data["timeline"]),
            communication=float(data["communication"]),
        )


@dataclass
class RankedProposal:
    """A proposal with its ranking outcome.

    Attributes:
        proposal: The source proposal (not copied, never modified).
        overall_score: Weighted aggregate of the factor scores (0-100).
        rank: 1-based position, 1 = best.
        confidence: 'High', 'Medium', 'Low' or 'Very Low'.
        strengths: Strength labels, never empty.
        concerns: Concern labels, may be empty.
        scores: The six factor scores.
    """

    proposal: Proposal
    overall_score: float
    rank: int
    confidence: str
    strengths: list[str]
    concerns: list[str]
    scores: FactorScores

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary for JSON output.

        Returns:
            Dict including the nested proposal and factor scores.
        """
        return {
            "rank": self.rank,
            "proposal_id": self.proposal.proposal_id,
            "company_name": self.proposal.company_name,
            "overall_score": round(self.overall_score, 2),
            "confidence": self.confidence,
            "strengths": list(self.strengths),
            "concerns": list(self.concerns),
            "scores": self.scores.to_dict(),
            "proposal": self.proposal.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RankedProposal":
        """Construct a RankedProposal from its to_dict() output.

        The nested 'proposal' record is used when present; otherwise the
        proposal is rebuilt from the top-level id and company name.

        Args:
            data: Dictionary as produced by to_dict() (or decoded JSON output).

        Returns:
            A RankedProposal instance.
        """
        proposal_data = data.get("proposal") or {
            "proposal_id": data.get("proposal_id"),
            "company_name": data.get("company_name"),
        }
        return cls(
            proposal=Proposal.from_dict(proposal_data),
            overall_score=float(data["overall_score"]),
            rank=int(data["rank"]),
            confidence=_to_str(data.get("confidence")),
            strengths=_to_list(data.get("strengths")),
            concerns=_to_list(data.get("concerns")),
            scores=FactorScores.from_dict(data["scores"]),
        )
