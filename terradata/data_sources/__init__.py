"""Data sources module."""

from terradata.data_sources.satellite import (
    SatelliteProvider,
    SatelliteReading,
    SyntheticSatelliteProvider,
    UniformSatelliteProvider,
)

__all__ = ["SatelliteProvider", "SatelliteReading", "SyntheticSatelliteProvider", "UniformSatelliteProvider"]
