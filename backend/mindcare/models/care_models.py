# mindcare/models/care_models.py
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AppointmentStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class AppointmentType(str, Enum):
    INITIAL_CONSULTATION = "Initial Consultation"
    FOLLOW_UP = "Follow-up"
    EMERGENCY = "Emergency"
    VIDEO_CALL = "Video Call"
    IN_PERSON = "In-Person"


class AlertType(str, Enum):
    MEDICATION = "medication"
    MOOD = "mood"
    APPOINTMENT = "appointment"
    EMERGENCY = "emergency"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class UserType(str, Enum):
    DOCTOR = "doctor"
    PATIENT = "patient"


class _Payload(BaseModel):
    model_config = ConfigDict(use_enum_values=True)


# ---------------------------
# Appointments
# ---------------------------
class AppointmentCreate(_Payload):
    doctorId: str = ""
    patientId: str = ""
    patientName: str = ""
    doctorName: str = ""
    date: str = ""
    time: str = ""
    duration: int = Field(default=60, gt=0)
    type: str = AppointmentType.INITIAL_CONSULTATION.value
    notes: Optional[str] = None


class AppointmentUpdate(_Payload):
    model_config = ConfigDict(extra="allow", use_enum_values=True)

    date: Optional[str] = None
    time: Optional[str] = None
    duration: Optional[int] = Field(default=None, gt=0)
    type: Optional[str] = None
    notes: Optional[str] = None


class StatusUpdate(_Payload):
    status: str
    actorId: Optional[str] = None


class CancelRequest(_Payload):
    patientId: Optional[str] = None
    reason: Optional[str] = None


# ---------------------------
# Alerts
# ---------------------------
class AlertCreate(_Payload):
    doctorId: str = ""
    patientId: str = ""
    patientName: str = ""
    type: AlertType = AlertType.APPOINTMENT
    message: str
    priority: Priority = Priority.MEDIUM
    appointmentId: Optional[str] = None
    recipientType: UserType = UserType.DOCTOR


class MarkReadRequest(_Payload):
    doctorId: Optional[str] = None
    patientId: Optional[str] = None
    appointmentId: Optional[str] = None


# ---------------------------
# Profiles
# ---------------------------
class EmergencyContact(_Payload):
    name: str = ""
    phone: str = ""
    relationship: str = ""


class PatientCreate(_Payload):
    id: Optional[str] = None
    name: str
    email: str = ""
    age: Optional[int] = Field(default=None, ge=0)
    gender: str = "Not specified"
    doctorId: Optional[str] = None
    primaryDiagnosis: Optional[str] = None
    emergencyContact: EmergencyContact = Field(default_factory=EmergencyContact)


class PatientUpdate(_Payload):
    name: Optional[str] = None
    email: Optional[str] = None
    age: Optional[int] = Field(default=None, ge=0)
    gender: Optional[str] = None
    doctorId: Optional[str] = None
    primaryDiagnosis: Optional[str] = None
    emergencyContact: Optional[EmergencyContact] = None


class DoctorCreate(_Payload):
    userId: str
    name: str
    email: str = ""
    specialization: str
    licenseNumber: str = ""
    experience: Optional[int] = Field(default=None, ge=0)
    qualifications: List[str] = Field(default_factory=list)


# ---------------------------
# Mood, messages, chat
# ---------------------------
class MoodEntryCreate(_Payload):
    patientId: str
    date: str
    value: int = Field(ge=1, le=10)
    notes: Optional[str] = None
    factors: List[str] = Field(default_factory=list)


class MessageCreate(_Payload):
    senderId: str
    receiverId: str
    senderName: str = ""
    senderType: UserType
    content: str = Field(min_length=1)
    type: str = "text"


class ChatSessionCreate(_Payload):
    patientId: str
    doctorId: Optional[str] = None
    title: str = "New conversation"


class ChatMessageCreate(_Payload):
    content: str = Field(min_length=1)
