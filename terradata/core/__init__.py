"""Core module."""
from terradata.core.simulation import Simulation
from terradata.core.reporting import season_summary
from terradata.core.formatter import format_summary
