"""Typed records for marketplace data.

Marketplace payloads are decoded field by field: absent or wrong-typed
values fall back to documented defaults so nothing downstream has to guard
against missing keys.
"""

from typing import Any, List, Mapping, Optional

from pydantic import BaseModel


def _str(raw: Mapping[str, Any], key: str, default: str = "") -> str:
    value = raw.get(key)
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


def _opt_str(raw: Mapping[str, Any], key: str) -> Optional[str]:
    value = _str(raw, key)
    return value or None


def _opt_number(raw: Mapping[str, Any], key: str) -> Optional[float]:
    value = raw.get(key)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    return None


def _str_list(raw: Mapping[str, Any], key: str) -> List[str]:
    """Decode a list of strings; objects with a "question" key are accepted."""
    value = raw.get(key)
    if not isinstance(value, list):
        return []
    items = []
    for item in value:
        if isinstance(item, str):
            items.append(item)
        elif isinstance(item, Mapping) and isinstance(item.get("question"), str):
            items.append(item["question"])
    return items


def _mapping(raw: Any) -> Mapping[str, Any]:
    return raw if isinstance(raw, Mapping) else {}


class Listing(BaseModel):
    """A live listing as returned by the discovery endpoint."""

    id: str = ""
    slug: str = ""
    title: str = ""
    type: Optional[str] = None
    token: Optional[str] = None
    reward_amount: Optional[float] = None
    compensation_type: Optional[str] = None
    deadline: Optional[str] = None
    agent_access: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Any) -> "Listing":
        raw = _mapping(raw)
        return cls(
            id=_str(raw, "id"),
            slug=_str(raw, "slug"),
            title=_str(raw, "title"),
            type=_opt_str(raw, "type"),
            token=_opt_str(raw, "token"),
            reward_amount=_opt_number(raw, "rewardAmount"),
            compensation_type=_opt_str(raw, "compensationType"),
            deadline=_opt_str(raw, "deadline"),
            agent_access=_opt_str(raw, "agentAccess"),
        )


class ListingDetails(Listing):
    """Full listing record from the details endpoint."""

    description: str = ""
    requirements: str = ""
    eligibility: str = ""
    eligibility_questions: List[str] = []
    deliverables: str = ""
    template: str = ""

    @classmethod
    def from_raw(cls, raw: Any) -> "ListingDetails":
        raw = _mapping(raw)
        base = Listing.from_raw(raw)
        return cls(
            **base.model_dump(),
            description=_str(raw, "description"),
            requirements=_str(raw, "requirements"),
            eligibility=_str(raw, "eligibility"),
            eligibility_questions=_str_list(raw, "eligibilityQuestions"),
            deliverables=_str(raw, "deliverables"),
            template=_str(raw, "template"),
        )


class Comment(BaseModel):
    """A message on a listing's comment thread."""

    id: str = ""
    message: str = ""
    author_id: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: Any) -> "Comment":
        raw = _mapping(raw)
        return cls(
            id=_str(raw, "id"),
            message=_str(raw, "message"),
            author_id=_opt_str(raw, "authorId"),
            created_at=_opt_str(raw, "createdAt"),
        )


class RankedListing(Listing):
    """A listing with the ranking step's verdict attached."""

    rank: int
    reasoning: str = ""
    recommended: bool = False

    @classmethod
    def from_model_item(cls, raw: Any, position: int) -> "RankedListing":
        """Decode one element of the model's ranked array.

        Accepts both camelCase (wire) and snake_case keys since the model
        echoes back whatever shape it was shown.
        """
        raw = _mapping(raw)
        base = Listing.from_raw(raw).model_dump()
        if base["reward_amount"] is None:
            base["reward_amount"] = _opt_number(raw, "reward_amount")
        for key in ("compensation_type", "agent_access"):
            base[key] = base[key] or _opt_str(raw, key)

        rank = raw.get("rank")
        if isinstance(rank, bool) or not isinstance(rank, (int, float)) or rank < 1:
            rank = position
        recommended = raw.get("recommended")
        return cls(
            **base,
            rank=int(rank),
            reasoning=_str(raw, "reasoning"),
            recommended=recommended if isinstance(recommended, bool) else False,
        )


class EligibilityAnswer(BaseModel):
    """One answered eligibility question on a submission."""

    question: str
    answer: str
