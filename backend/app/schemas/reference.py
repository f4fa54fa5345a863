"""Enumerations and reference tables used by dispatchers."""

from enum import StrEnum


class UnitType(StrEnum):
    LASD = "LASD"
    CHP = "CHP"
    LAPD = "LAPD"
    DHS = "DHS"


class Subdivision(StrEnum):
    """LAPD subdivisions; no other unit type carries one."""

    HC = "HC"
    SUP = "SUP"
    PU = "PU"


class UnitStatus(StrEnum):
    AVAILABLE = "Available"
    BUSY = "Busy"
    ON_SCENE = "On Scene"
    UNAVAILABLE = "Unavailable"
    OFF_DUTY = "Off Duty"


class CallOrigin(StrEnum):
    CALLER = "Caller"
    RADIO = "Radio"
    DISPATCH = "Dispatch"
    ALARMS = "Alarms"


class Priority(StrEnum):
    """Call priority, keyed the way dispatch screens store it."""

    HIGH = "1"
    MEDIUM = "2"
    LOW = "3"

    @property
    def label(self) -> str:
        return self.name.capitalize()


SUBDIVIDED_TYPE = UnitType.LAPD

TEN_CODES: dict[str, str] = {
    "10-0": "Disappeared",
    "10-1": "Frequency Change",
    "10-2": "Radio Check",
    "10-3": "Stop Transmitting",
    "10-4": "Affirmative",
    "10-5": "AFK (Less than 5 Minutes)",
    "10-6": "Busy",
    "10-7": "Out of Service",
    "10-8": "In Service",
    "10-9": "Repeat",
    "10-10": "Fight in Progress",
    "10-11": "Traffic Stop",
    "10-12": "Active Ride Along",
    "10-13": "Shots Fired",
    "10-15": "Subject In Custody; En Route to Station",
    "10-16": "Stolen Vehicle",
    "10-17": "Suspicious Person",
    "10-20": "Location",
    "10-22": "Disregard",
    "10-23": "Arrived On Scene",
    "10-25": "Domestic Dispute",
    "10-26": "ETA",
    "10-27": "Driver's License Check",
    "10-28": "Vehicle Plate Check",
    "10-29": "NCIC Warrant Check",
    "10-30": "Wanted Person",
    "10-31": "No Warrants",
    "10-32": "Request Backup",
    "10-35": "Wrap Up The Scene",
    "10-41": "Beginning Tour Of Duty",
    "10-42": "Ending Tour Of Duty",
    "10-43": "Information",
    "10-49": "Homicide",
    "10-50": "Vehicle Accident",
    "10-51": "Request Towing Service",
    "10-52": "Request EMS",
    "10-53": "Request Fire Department",
    "10-54": "Disabled Vehicle",
    "10-55": "Intoxicated Driver",
    "10-56": "Intoxicated Pedestrian",
    "10-60": "Armed With A Gun",
    "10-61": "Armed With A Knife",
    "10-62": "Kidnapping",
    "10-64": "Sexual Assault",
    "10-65": "Escorting Prisoner",
    "10-66": "Reckless Driver",
    "10-67": "Fire",
    "10-68": "Armed Robbery",
    "10-70": "Foot Pursuit",
    "10-71": "Request Supervisor At Scene",
    "10-73": "Advise Status",
    "10-80": "Vehicle Pursuit",
    "10-90": "Patrol Warning",
    "10-91": "Patrol Kick",
    "10-93": "Removed From Patrol",
    "10-97": "En Route",
    "10-99": "Officer In Distress",
    "11-44": "Person Deceased",
    "51-50": "Medical Evaluation",
    "51-52": "Drugs",
}

DEFAULT_CODE = "10-0"
