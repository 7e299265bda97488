"""
Output Records

pydantic models for the serialized forms of translator output.

An ephemeris record carries the frame tag and a flat ``cartesian`` list of
[t0, x0, y0, z0, t1, x1, ...] with instants as ISO-8601 UTC strings and
coordinates in metres. A run that stopped early also carries ``error``;
serialize with ``exclude_none=True`` to leave it out of complete runs.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class EphemerisRecord(BaseModel):
    """Time-tagged positions in one reference frame"""

    model_config = ConfigDict(populate_by_name=True)

    reference_frame: str = Field(alias="referenceFrame")
    cartesian: List[Union[str, float]] = Field(default_factory=list)
    error: Optional[str] = None

    @classmethod
    def from_result(cls, result) -> "EphemerisRecord":
        """Build from a PropagationResult (truncated results keep their valid prefix and the error)."""
        cartesian: List[Union[str, float]] = []
        for state in result.samples:
            cartesian.append(state.instant.isoformat())
            cartesian.extend(float(c) for c in state.position)
        error = str(result.error) if result.error is not None else None
        return cls(reference_frame=result.frame.tag, cartesian=cartesian, error=error)

    @property
    def truncated(self) -> bool:
        return self.error is not None

    @property
    def sample_count(self) -> int:
        return len(self.cartesian) // 4


class KeplerianRecord(BaseModel):
    """Keplerian elements at the TLE epoch (angles in radians, a in metres)"""

    model_config = ConfigDict(populate_by_name=True)

    epoch: str
    semi_major_axis: float = Field(alias="semiMajorAxis")
    eccentricity: float
    inclination: float
    argument_of_perigee: float = Field(alias="argumentOfPerigee")
    raan: float = Field(alias="rightAscensionOfAscendingNode")
    true_anomaly: float = Field(alias="trueAnomaly")
    gravitational_parameter: float = Field(alias="gravitationalParameter")

    @classmethod
    def from_elements(cls, elements) -> "KeplerianRecord":
        return cls(
            epoch=elements.instant.isoformat(),
            semi_major_axis=elements.semi_major_axis,
            eccentricity=elements.eccentricity,
            inclination=elements.inclination,
            argument_of_perigee=elements.argument_of_perigee,
            raan=elements.raan,
            true_anomaly=elements.true_anomaly,
            gravitational_parameter=elements.gravitational_parameter,
        )
