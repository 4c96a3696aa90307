"""Enumerations shared by the LINC API and the admin console.

Values match the upstream wire format: numeric codes travel as strings.
"""

from enum import Enum


class UserGroupType(str, Enum):
    FIXED_DLTC = "10"
    MOBILE_DLTC = "11"
    PRINTING_CENTER = "12"
    REGISTERING_AUTHORITY = "20"
    PROVINCIAL_HELP_DESK = "30"
    NATIONAL_HELP_DESK = "31"
    VEHICLE_TESTING_STATION = "40"
    ADMIN_OFFICE = "50"


class RegistrationStatus(str, Enum):
    PENDING_REGISTRATION = "1"
    REGISTERED = "2"
    SUSPENDED = "3"
    PENDING_RENEWAL = "4"
    CANCELLED = "5"
    PENDING_INSPECTION = "6"
    INSPECTION_FAILED = "7"
    DEREGISTERED = "8"


class InfrastructureType(str, Enum):
    FIXED_DLTC = "10"
    MOBILE_DLTC = "11"
    PRINTING_CENTER = "12"
    COMBINED_CENTER = "13"
    ADMIN_OFFICE = "14"
    REGISTERING_AUTHORITY = "20"
    PROVINCIAL_OFFICE = "30"
    NATIONAL_OFFICE = "31"
    VEHICLE_TESTING = "40"
    HELP_DESK = "50"


class OperationalStatus(str, Enum):
    OPERATIONAL = "operational"
    MAINTENANCE = "maintenance"
    SUSPENDED = "suspended"
    SETUP = "setup"
    DECOMMISSIONED = "decommissioned"
    INSPECTION = "inspection"


class LocationScope(str, Enum):
    NATIONAL = "national"
    PROVINCIAL = "provincial"
    REGIONAL = "regional"
    LOCAL = "local"


class ResourceType(str, Enum):
    PRINTER = "printer"
    COMPUTER = "computer"
    TESTING_EQUIPMENT = "testing_equipment"
    VEHICLE = "vehicle"
    OTHER = "other"


class ResourceStatus(str, Enum):
    AVAILABLE = "available"
    IN_USE = "in_use"
    MAINTENANCE = "maintenance"
    OUT_OF_ORDER = "out_of_order"


class AssignmentType(str, Enum):
    PRIMARY = "PRIMARY"
    SECONDARY = "SECONDARY"
    TEMPORARY = "TEMPORARY"
    BACKUP = "BACKUP"
    TRAINING = "TRAINING"
    SUPERVISION = "SUPERVISION"
    MAINTENANCE = "MAINTENANCE"


class AssignmentStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"
    PENDING = "PENDING"
    EXPIRED = "EXPIRED"


class UserStatus(str, Enum):
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    INACTIVE = "INACTIVE"
    LOCKED = "LOCKED"
    PENDING_ACTIVATION = "PENDING_ACTIVATION"


class UserType(str, Enum):
    STANDARD = "1"
    SYSTEM = "2"
    EXAMINER = "3"
    SUPERVISOR = "4"
    ADMIN = "5"


class IDType(str, Enum):
    TRN = "01"
    SA_ID = "02"
    FOREIGN_ID = "03"
    PASSPORT = "04"
    OTHER = "97"


class AuthorityLevel(str, Enum):
    NATIONAL = "NATIONAL"
    PROVINCIAL = "PROVINCIAL"
    REGIONAL = "REGIONAL"
    LOCAL = "LOCAL"
    OFFICE = "OFFICE"
    PERSONAL = "PERSONAL"

    @property
    def label(self) -> str:
        return f"{self.value.capitalize()} Level"


PROVINCES: dict[str, str] = {
    "EC": "Eastern Cape",
    "FS": "Free State",
    "GP": "Gauteng",
    "KZN": "KwaZulu-Natal",
    "LP": "Limpopo",
    "MP": "Mpumalanga",
    "NC": "Northern Cape",
    "NW": "North West",
    "WC": "Western Cape",
}
