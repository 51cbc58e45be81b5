"""
Pydantic models used for request validation and API data contracts.

Each class defines the structure of data expected in API endpoints, ensuring
validation and automatic OpenAPI schema generation. Emptiness and score
ranges are checked by the service layer so that every rule has one home and
one error message.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from dialogue_rating.database.entities.rating import RATING_METRICS


class UserCredentials(BaseModel):
    """
    Represents login credentials for a user.
    """
    username: Optional[str] = Field(None, description="Username or email of the user.", examples=["alice"])
    """The username (or email) of the user"""
    email: Optional[str] = Field(None, description="Email, accepted when `username` is not sent.")
    """Alternative login field"""
    password: Optional[str] = None
    """The plaintext password provided for authentication."""

    @property
    def login(self) -> Optional[str]:
        return self.username or self.email


class UserData(BaseModel):
    """
    Represents the data needed to register a new user.
    """
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class RatingSubmission(BaseModel):
    """
    One rating of one dialogue. Every metric is optional; sent metrics must be integers 1-5.

    Scores are strict: `true` or `"3"` is rejected rather than coerced.
    """
    model_config = ConfigDict(extra="ignore")

    dialogue_id: Optional[str] = Field(None, description="External dialogue id.", examples=["dialogue_7"])
    realism: Optional[StrictInt] = Field(None, description="Realism of the dialogue as a whole.")
    conciseness: Optional[StrictInt] = Field(None, description="Absence of needless verbosity.")
    coherence: Optional[StrictInt] = Field(None, description="Logical flow across turns.")
    overall_naturalness: Optional[StrictInt] = Field(None, description="How human the exchange reads.")
    utterance_realism: Optional[StrictInt] = Field(None, description="Realism of individual utterances.")
    script_following: Optional[StrictInt] = Field(None, description="Adherence to the generation script.")

    def scores(self) -> dict:
        """Metric name → submitted score (None when not sent)."""
        return {metric: getattr(self, metric) for metric in RATING_METRICS}
