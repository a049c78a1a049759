from enum import Enum


class UserType(str, Enum):
    citizen = "citizen"
    admin = "admin"
    field_staff = "field_staff"
    ngo = "ngo"


class IssueStatus(str, Enum):
    reported = "reported"
    acknowledged = "acknowledged"
    assigned = "assigned"
    in_progress = "in_progress"
    resolved = "resolved"
    rejected = "rejected"
    reopened = "reopened"


class IssuePriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"


class IssueCategory(str, Enum):
    pothole = "Pothole"
    streetlight = "Streetlight"
    garbage = "Garbage"
    water_leak = "Water Leak"
    road_damage = "Road Damage"
    drainage = "Drainage"
    encroachment = "Encroachment"
    other = "Other"


class MediaType(str, Enum):
    image = "image"
    video = "video"
    audio = "audio"


class ApprovalStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class VerificationStatus(str, Enum):
    pending = "pending"
    verified = "verified"
    rejected = "rejected"


class StaffRole(str, Enum):
    team_member = "Team Member"
    supervisor = "Supervisor"
    manager = "Manager"
    department_head = "Department Head"
