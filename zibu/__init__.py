"""
Zibu - Virtual Pet Needs Simulation
Decay, persistence and interaction engine behind the Zibu companion app.
"""

__version__ = "0.3.0"
