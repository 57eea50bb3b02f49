"""Data models for Kaggle API responses."""

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from .errors import KaggleJsonError


def _parse_timestamp(value: Any, field_name: str) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp from the API. Naive values are UTC."""
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise KaggleJsonError(f"{field_name}: expected a timestamp string, got {value!r}")
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise KaggleJsonError(f"{field_name}: {e}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _require_object(data: Any, record: str) -> dict:
    if not isinstance(data, dict):
        raise KaggleJsonError(f"expected a {record} object, got {type(data).__name__}")
    return data


def _str_field(data: dict, name: str) -> str:
    """A string field; absent means empty, null or another type is an error."""
    value = data.get(name, "")
    if not isinstance(value, str):
        raise KaggleJsonError(f"{name}: expected a string, got {value!r}")
    return value


def _optional_str_field(data: dict, name: str) -> Optional[str]:
    value = data.get(name)
    if value is not None and not isinstance(value, str):
        raise KaggleJsonError(f"{name}: expected a string or null, got {value!r}")
    return value


@dataclass
class KaggleCredentials:
    """A Kaggle username and API key."""
    username: str
    key: str

    def __repr__(self) -> str:
        return f"KaggleCredentials(username={self.username!r}, key='***')"


@dataclass
class AuthenticationResponse:
    """Result of the authenticate tool."""
    success: bool
    message: str
    username: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class Competition:
    """Represents a Kaggle competition."""
    ref: str
    title: str
    url: str
    category: str
    deadline: Optional[datetime]
    reward: Optional[str]
    team_count: int
    user_has_entered: bool
    description: Optional[str] = None

    @classmethod
    def from_api_response(cls, data: dict) -> "Competition":
        """Create Competition from Kaggle API response."""
        data = _require_object(data, "competition")
        team_count = data.get("teamCount", 0)
        if isinstance(team_count, bool) or not isinstance(team_count, int) or team_count < 0:
            raise KaggleJsonError(f"teamCount: expected a non-negative integer, got {team_count!r}")
        user_has_entered = data.get("userHasEntered", False)
        if not isinstance(user_has_entered, bool):
            raise KaggleJsonError(f"userHasEntered: expected a boolean, got {user_has_entered!r}")

        return cls(
            ref=_str_field(data, "ref"),
            title=_str_field(data, "title"),
            url=_str_field(data, "url"),
            category=_str_field(data, "category"),
            deadline=_parse_timestamp(data.get("deadline"), "deadline"),
            reward=_optional_str_field(data, "reward"),
            team_count=team_count,
            user_has_entered=user_has_entered,
            description=_optional_str_field(data, "description"),
        )

    def to_dict(self) -> dict:
        """Serialize using the API's field names."""
        return {
            "ref": self.ref,
            "title": self.title,
            "url": self.url,
            "category": self.category,
            "deadline": self.deadline.isoformat() if self.deadline else None,
            "reward": self.reward,
            "teamCount": self.team_count,
            "userHasEntered": self.user_has_entered,
            "description": self.description,
        }


@dataclass
class Dataset:
    """Represents a Kaggle dataset."""
    id: str
    ref: str
    title: str
    subtitle: Optional[str]
    creator_name: str
    total_bytes: int
    url: str
    last_updated: Optional[datetime]
    download_count: int
    vote_count: int
    usability_rating: float

    @classmethod
    def from_api_response(cls, data: dict) -> "Dataset":
        """Create Dataset from Kaggle API response."""
        data = _require_object(data, "dataset")
        return cls(
            id=str(data.get("id", "")),
            ref=data.get("ref", ""),
            title=data.get("title", ""),
            subtitle=data.get("subtitle"),
            creator_name=data.get("creatorName", ""),
            total_bytes=data.get("totalBytes") or 0,
            url=data.get("url", ""),
            last_updated=_parse_timestamp(data.get("lastUpdated"), "lastUpdated"),
            download_count=data.get("downloadCount") or 0,
            vote_count=data.get("voteCount") or 0,
            usability_rating=data.get("usabilityRating") or 0.0,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ref": self.ref,
            "title": self.title,
            "subtitle": self.subtitle,
            "creatorName": self.creator_name,
            "totalBytes": self.total_bytes,
            "url": self.url,
            "lastUpdated": self.last_updated.isoformat() if self.last_updated else None,
            "downloadCount": self.download_count,
            "voteCount": self.vote_count,
            "usabilityRating": self.usability_rating,
        }


@dataclass
class Kernel:
    """Represents a Kaggle kernel (notebook or script)."""
    ref: str
    title: str
    author: str
    language: str
    kernel_type: str
    last_run_time: Optional[datetime]
    total_votes: int

    @classmethod
    def from_api_response(cls, data: dict) -> "Kernel":
        """Create Kernel from Kaggle API response."""
        data = _require_object(data, "kernel")
        return cls(
            ref=data.get("ref", ""),
            title=data.get("title", ""),
            author=data.get("author", ""),
            language=data.get("language", ""),
            kernel_type=data.get("kernelType", ""),
            last_run_time=_parse_timestamp(data.get("lastRunTime"), "lastRunTime"),
            total_votes=data.get("totalVotes") or 0,
        )

    def to_dict(self) -> dict:
        return {
            "ref": self.ref,
            "title": self.title,
            "author": self.author,
            "language": self.language,
            "kernelType": self.kernel_type,
            "lastRunTime": self.last_run_time.isoformat() if self.last_run_time else None,
            "totalVotes": self.total_votes,
        }


@dataclass
class Model:
    """Represents a Kaggle model."""
    id: str
    ref: str
    title: str
    subtitle: Optional[str]
    author: str
    url: Optional[str]

    @classmethod
    def from_api_response(cls, data: dict) -> "Model":
        """Create Model from Kaggle API response."""
        data = _require_object(data, "model")
        return cls(
            id=str(data.get("id", "")),
            ref=data.get("ref", ""),
            title=data.get("title", ""),
            subtitle=data.get("subtitle"),
            author=data.get("author", ""),
            url=data.get("url"),
        )

    def to_dict(self) -> dict:
        return asdict(self)
