# 📄 File: adoptd/modules/plant_ai/domain/models/plant_ai.py
# 🧭 Purpose (Layman Explanation):
# Describes what the plant scanner and the chat assistant give back: a plant's name
# and origin, a diagnosis split into clear sections, and chat messages.
# 🧪 Purpose (Technical Summary):
# Pydantic models for scan requests/results (identification, sectioned diagnosis with
# time recommendations) and chat history messages.
# 🔗 Dependencies:
# pydantic, enum, care advice TimeRecommendation
# 🔄 Connected Modules / Calls From:
# Plant scanner, chat consultant, response parsers, plant AI endpoints

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from adoptd.modules.care_advice.domain.models.weather import TimeRecommendation
from adoptd.shared.utils.helpers import utc_now


class ScanType(str, Enum):
    IDENTIFY = "identify"
    DIAGNOSE = "diagnose"


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class PlantIdentification(BaseModel):
    name: str
    variety: Optional[str] = None
    origin: Optional[str] = None


class DiagnosisSection(BaseModel):
    heading: Optional[str] = None
    content: List[str] = []
    recommendations: List[TimeRecommendation] = []


class DiagnosisResult(BaseModel):
    sections: List[DiagnosisSection] = []

    @property
    def recommendations(self) -> List[TimeRecommendation]:
        return [rec for section in self.sections for rec in section.recommendations]


class ScanResult(BaseModel):
    scan_type: ScanType
    identification: Optional[PlantIdentification] = None
    diagnosis: Optional[DiagnosisResult] = None
    raw_text: str


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    role: ChatRole
    content: str
    created_at: datetime = Field(default_factory=utc_now)
