"""Local data store for the PhysioSim clinical simulator."""

__version__ = "0.1.0"
