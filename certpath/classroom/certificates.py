"""
Certificate issuer boundary.

The engine never persists certificates; it only announces the moment a
trainee becomes eligible, once per trainee and course.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


class CertificateIssuer(Protocol):
    def certification_achieved(self, trainee_id: str, course_id: str, timestamp: datetime) -> None: ...


@dataclass
class CertificationEvent:
    trainee_id: str
    course_id: str
    timestamp: datetime


class RecordingIssuer:
    """Issuer that keeps events in memory, for tests and local tooling."""

    def __init__(self):
        self.events: list[CertificationEvent] = []

    def certification_achieved(self, trainee_id: str, course_id: str, timestamp: datetime) -> None:
        self.events.append(CertificationEvent(trainee_id, course_id, timestamp))
