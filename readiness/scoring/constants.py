"""Fixed parameters of the settlement readiness model.

Validity windows, sub-score coefficients and default weights live here so
every consumer (calculator, ranking, server) reads one definition.
"""

from __future__ import annotations

# --- Validity windows (days) ---
SHOOTING_VALIDITY_DAYS = 180  # range qualification, same as the planning cycle
CERT_VALIDITY_DAYS = 365  # certification refresh cycle

# Trailing window for "recent" training events and drills
RECENT_WINDOW_MONTHS = 6

# --- Personnel fitness ---
SHOOTING_SHARE = 0.7
CERT_SHARE = 0.3

# --- Component health ---
COMPONENT_CHECKS = (
    "armory",
    "armored_vehicle",
    "shelter",
    "fence_type",
    "command_center_type",
    "defensive_security_type",
)

# --- Training ---
TARGET_RECENT_EVENTS = 2
TARGET_RECENT_DRILLS = 1
EVENT_POINTS = 50.0
DRILL_POINTS = 50.0

# --- Threat ---
THREAT_SCALE_MAX = 5
VILLAGE_PROXIMITY_ALERT = 4  # village_proximity >= this is called out

# --- Response capability ---
RESPONSE_QUALIFIED_POINTS = 40.0
RESPONSE_ARMED_POINTS = 30.0
RESPONSE_WEEKEND_POINTS = 30.0

# --- Open incidents ---
INCIDENT_POINTS = 25
INCIDENT_OPEN_STATUS = "open"

# --- Score range ---
SCORE_MIN = 0
SCORE_MAX = 100

# --- Presentation bands ---
BAND_HIGH = 70
BAND_MID = 40

# --- Default weights ---
DEFAULT_WEIGHTS: dict[str, float] = {
    "personnel": 0.4,
    "components": 0.4,
    "training": 0.2,
    "risk_threat": 0.3,
    "risk_infra": 0.3,
    "risk_response": 0.3,
    "risk_incidents": 0.1,
    "priority_risk": 0.6,
    "priority_readiness": 0.4,
}

WEIGHT_NAMES = tuple(DEFAULT_WEIGHTS)

WEIGHT_GROUPS: dict[str, tuple[str, ...]] = {
    "readiness": ("personnel", "components", "training"),
    "risk": ("risk_threat", "risk_infra", "risk_response", "risk_incidents"),
    "priority": ("priority_risk", "priority_readiness"),
}

# Tolerance for the informational "group sums to 1" check
NORMALIZED_TOLERANCE = 0.01
