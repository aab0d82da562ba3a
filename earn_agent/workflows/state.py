"""State schemas and resume payloads for the two workflows."""

from typing import List, Optional, TypedDict

from pydantic import BaseModel

from ..models import EligibilityAnswer


class DiscoveryState(TypedDict, total=False):
    """State for the discovery graph: fetch -> rank -> await selection."""

    # Input
    take: int
    deadline: Optional[str]

    # Fetch / rank results
    listings: List[dict]
    ranked_listings: List[dict]
    ranking_source: str  # model | fallback | empty
    error: Optional[str]

    # Output
    selected_slugs: List[str]


class ExecutionState(TypedDict, total=False):
    """State for the execution graph: analyze -> generate -> [publish] -> review -> submit."""

    # Input
    slug: str

    # Deep analysis
    listing_id: str
    title: str
    description: str
    type: str
    requirements: str
    deliverable_format: str
    reward_amount: Optional[float]
    eligibility_questions: List[str]
    comments: List[dict]

    # Generation / publish
    workspace_path: str
    summary: str
    artifacts: List[str]
    success: bool
    error: Optional[str]
    repo_url: Optional[str]

    # Human review
    approved: bool
    link: Optional[str]
    other_info: Optional[str]
    eligibility_answers: Optional[List[dict]]
    telegram: Optional[str]

    # Output
    submitted: bool
    submission_id: Optional[str]
    submit_error: Optional[str]


class SelectionResume(BaseModel):
    """Human selection that resumes a suspended discovery run."""

    selected_slugs: List[str]


class ReviewDecision(BaseModel):
    """Human review that resumes a suspended execution run."""

    approved: bool
    link: Optional[str] = None
    other_info: Optional[str] = None
    eligibility_answers: Optional[List[EligibilityAnswer]] = None
    telegram: Optional[str] = None
