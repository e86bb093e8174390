"""
Analysis request and response models.

Sandi Metz Principles:
- Single Responsibility: Analysis data structures
- Clear naming: Descriptive fields
- Immutable data: Requests are read-only after creation
"""

from datetime import datetime
from enum import Enum
from typing import FrozenSet, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class BatteryTrend(str, Enum):
    """Direction of the energy level."""

    RISING = "rising"
    FALLING = "falling"
    STABLE = "stable"


_LEGACY_TRENDS = {"recovering": "rising", "declining": "falling"}


class TimeOfDay(str, Enum):
    """Coarse time buckets used by the mobile client."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


class FocusTag(str, Enum):
    """Focus areas a user can select."""

    WORK = "work"
    BEAUTY = "beauty"
    DIET = "diet"
    CHILL = "chill"
    SLEEP = "sleep"
    FITNESS = "fitness"


class _CamelModel(BaseModel):
    """Base model accepting both snake_case and camelCase field names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        allow_inf_nan=False,
    )


class UserContext(_CamelModel):
    """User-selected context for an analysis."""

    time_of_day: str = Field(..., min_length=1, description="Time bucket")
    active_tags: FrozenSet[str] = Field(
        default_factory=frozenset, description="Focus tags"
    )
    language: Literal["ja", "en"] = Field(default="en", description="Language")
    user_mode: Literal["standard", "athlete"] = Field(
        default="standard", description="User mode"
    )

    @field_validator("time_of_day", mode="before")
    @classmethod
    def _unwrap_enum(cls, v: object) -> object:
        return v.value if isinstance(v, TimeOfDay) else v

    @field_validator("active_tags", mode="before")
    @classmethod
    def _unwrap_tags(cls, v: object) -> object:
        if isinstance(v, (list, tuple, set, frozenset)):
            return frozenset(t.value if isinstance(t, FocusTag) else t for t in v)
        return v

    @property
    def sorted_tags(self) -> list[str]:
        """Tags in lexicographic order."""
        return sorted(self.active_tags)


class EnvironmentalContext(_CamelModel):
    """Weather readings at the user's location."""

    humidity: float = Field(..., ge=0.0, le=100.0, description="Relative humidity %")
    pressure_trend: float = Field(..., description="Pressure change in hPa")
    feels_like: Optional[float] = Field(None, description="Apparent temperature C")
    uv_index: Optional[float] = Field(None, ge=0.0, description="UV index")
    weather_code: Optional[int] = Field(None, description="WMO weather code")


class AnalysisRequest(_CamelModel):
    """Context for one advice analysis."""

    battery_level: float = Field(..., ge=0.0, le=100.0, description="Energy level")
    battery_trend: BatteryTrend = Field(
        default=BatteryTrend.STABLE, description="Energy direction"
    )
    user_context: UserContext
    environmental_context: EnvironmentalContext

    @field_validator("battery_trend", mode="before")
    @classmethod
    def _accept_legacy_trend(cls, v: object) -> object:
        # Mobile clients still send the older names
        return _LEGACY_TRENDS.get(v, v) if isinstance(v, str) else v

    @property
    def tag_count(self) -> int:
        """Number of active focus tags."""
        return len(self.user_context.active_tags)


class DataQuality(BaseModel):
    """Data quality block of an analysis response."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    health_data_completeness: Optional[float] = Field(None, ge=0.0, le=100.0)
    weather_data_age: Optional[int] = Field(None, ge=0)
    analysis_timestamp: Optional[datetime] = None


class AnalysisResponse(BaseModel):
    """
    AI analysis payload.

    Only the timestamps are typed; every other field the provider returns
    is carried through untouched.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="allow"
    )

    generated_at: datetime = Field(
        default_factory=datetime.now, description="Generation time"
    )
    data_quality: Optional[DataQuality] = Field(None, description="Data quality")

    def with_refreshed_timestamp(
        self, now: datetime, include_data_quality: bool = True
    ) -> "AnalysisResponse":
        """
        Copy the analysis with its timestamps set to now.

        Args:
            now: New timestamp
            include_data_quality: Also refresh data_quality.analysis_timestamp

        Returns:
            Shallow copy of this analysis
        """
        update: dict = {"generated_at": now}
        if include_data_quality and self.data_quality is not None:
            update["data_quality"] = self.data_quality.model_copy(
                update={"analysis_timestamp": now}
            )
        return self.model_copy(update=update)
