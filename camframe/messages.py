"""Pydantic models for scene files and serialized reports."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from camframe.geometry.bounds import BoundingVolume
from camframe.visibility.checker import TestReport


class VolumeSpec(BaseModel):
    """One axis-aligned bounding volume in a scene file."""

    center: list[float] = Field(description="[x, y, z] world-space center")
    extents: list[float] = Field(description="[x, y, z] half-size per axis")

    @field_validator("center", "extents")
    @classmethod
    def check_vec3(cls, v: list[float]) -> list[float]:
        if len(v) != 3:
            raise ValueError(f"expected 3 components, got {len(v)}")
        return v

    @field_validator("extents")
    @classmethod
    def check_non_negative(cls, v: list[float]) -> list[float]:
        if any(c < 0 for c in v):
            raise ValueError("extents must be non-negative")
        return v

    def to_volume(self) -> BoundingVolume:
        return BoundingVolume(center=self.center, extents=self.extents)


class ViewportSpec(BaseModel):
    width: float = Field(gt=0)
    height: float = Field(gt=0)


class SceneFile(BaseModel):
    """Scene description consumed by the command-line runner.

    ``camera`` entries override the ``camera`` config section.
    """

    camera: dict = Field(default_factory=dict)
    viewport: Optional[ViewportSpec] = None
    volumes: list[VolumeSpec] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "camera": {"position": [0.0, 1.0, -10.0], "orthographic": False},
                "viewport": {"width": 800, "height": 600},
                "volumes": [
                    {"center": [0.0, 0.0, 0.0], "extents": [1.0, 1.0, 1.0]},
                    {"center": [3.0, 1.0, 2.0], "extents": [0.5, 0.5, 0.5]},
                ],
            }
        }
    )


class VolumeVerdictMessage(BaseModel):
    index: int
    center: list[float]
    verdict: str
    visible: bool


class ReportMessage(BaseModel):
    """Serialized TestReport."""

    fail_count: int = Field(ge=0)
    visible_count: int = Field(ge=0)
    total_count: int = Field(ge=0)
    summary: str = Field(description="'<visible>/<total>'")
    volumes: list[VolumeVerdictMessage] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: TestReport) -> "ReportMessage":
        return cls(
            fail_count=report.fail_count,
            visible_count=report.visible_count,
            total_count=report.total_count,
            summary=f"{report.visible_count}/{report.total_count}",
            volumes=[
                VolumeVerdictMessage(
                    index=r.index,
                    center=r.center.tolist(),
                    verdict=r.verdict.value,
                    visible=r.visible,
                )
                for r in report.results
            ],
        )
