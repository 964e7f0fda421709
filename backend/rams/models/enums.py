"""Enumerations for RAMS form values and compliance findings."""

import enum


class Severity(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Regulation(str, enum.Enum):
    """Rule tags. Declaration order is the evaluation order."""

    CDM = "CDM"
    COSHH = "COSHH"
    RIDDOR = "RIDDOR"
    WORKING_AT_HEIGHT = "WORKING_AT_HEIGHT"
    MANUAL_HANDLING = "MANUAL_HANDLING"
    PPE = "PPE"


class Hazard(str, enum.Enum):
    WORKING_AT_HEIGHT = "Working at Height"
    ELECTRICAL = "Electrical"
    MANUAL_HANDLING = "Manual Handling"
    POWER_TOOLS = "Power Tools / Equipment"
    HAZARDOUS_SUBSTANCES = "Hazardous Substances (COSHH)"
    SLIPS_TRIPS_FALLS = "Slips, Trips and Falls"
    NOISE_VIBRATION = "Noise & Vibration"
    DUST = "Dust / Airborne Particles"
    HOT_WORKS = "Hot Works"
    CONFINED_SPACES = "Confined Spaces"
    LONE_WORKING = "Lone Working"
    VEHICULAR_MOVEMENT = "Vehicular Movement"
    FIRE_EMERGENCY = "Fire / Emergency Risks"


class PPEItem(str, enum.Enum):
    HARD_HAT = "Hard Hat"
    SAFETY_BOOTS = "Safety Boots (Steel Toe)"
    HI_VIS = "High-Visibility Vest"
    SAFETY_GLASSES = "Safety Glasses / Goggles"
    FALL_ARREST_HARNESS = "Fall Arrest Harness"
    GLOVES = "Gloves"
    EAR_DEFENDERS = "Ear Defenders / Plugs"
    DUST_MASK = "Dust Mask / Respirator"
    FACE_SHIELD = "Face Shield / Visor"
