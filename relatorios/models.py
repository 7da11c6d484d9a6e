from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class ReportStatus(str, Enum):
    DRAFT = 'RASCUNHO'
    FINAL = 'FINALIZADO'

    @property
    def label(self) -> str:
        return 'Finalizado' if self is ReportStatus.FINAL else 'Pendente'


def _strip_optional(v):
    if v is None:
        return None
    if isinstance(v, str):
        return v.strip() or None
    return v


def _optional_id(v):
    # ids podem vir numéricos do banco
    if v is None:
        return None
    return str(v).strip() or None


class ChecklistItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    description: str
    completed: bool = False
    note: Optional[str] = None
    order: Optional[int] = None
    report_id: Optional[str] = None

    @field_validator('description', mode='before')
    @classmethod
    def validate_description(cls, v):
        if v is None:
            raise ValueError('Descrição do item é obrigatória')
        if isinstance(v, str) and not v.strip():
            raise ValueError('Descrição do item é obrigatória')
        return v.strip() if isinstance(v, str) else v

    @field_validator('note', mode='before')
    @classmethod
    def validate_note(cls, v):
        return _strip_optional(v)

    @field_validator('id', 'report_id', mode='before')
    @classmethod
    def validate_ids(cls, v):
        return _optional_id(v)

    @property
    def has_note(self) -> bool:
        return bool(self.note)


class Photo(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    name: str = ''
    url: Optional[str] = None
    image_data: Optional[bytes] = None
    order: Optional[int] = None
    report_id: Optional[str] = None

    @field_validator('name', mode='before')
    @classmethod
    def validate_name(cls, v):
        return str(v or '').strip()

    @field_validator('url', mode='before')
    @classmethod
    def validate_url(cls, v):
        return _strip_optional(v)

    @field_validator('id', 'report_id', mode='before')
    @classmethod
    def validate_ids(cls, v):
        return _optional_id(v)

    @field_validator('image_data', mode='before')
    @classmethod
    def validate_image_data(cls, v):
        # buffer vazio equivale a "sem imagem"
        if isinstance(v, (bytes, bytearray)) and not v:
            return None
        return bytes(v) if isinstance(v, bytearray) else v


class ReportDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    title: str
    report_number: Optional[str] = None
    report_type: Optional[str] = None
    date: datetime
    status: ReportStatus = ReportStatus.DRAFT
    description: Optional[str] = None
    general_notes: Optional[str] = None
    conclusion: Optional[str] = None
    recommendations: Optional[str] = None
    items: List[ChecklistItem] = []
    photos: List[Photo] = []

    @field_validator('title', mode='before')
    @classmethod
    def validate_title(cls, v):
        if v is None:
            raise ValueError('Campo obrigatório não preenchido')
        if isinstance(v, str) and not v.strip():
            raise ValueError('Campo obrigatório não preenchido')
        return v.strip() if isinstance(v, str) else v

    @field_validator('report_number', 'report_type', 'description', 'general_notes',
                     'conclusion', 'recommendations', mode='before')
    @classmethod
    def validate_optional_text(cls, v):
        return _strip_optional(v)

    @field_validator('id', mode='before')
    @classmethod
    def validate_id(cls, v):
        return _optional_id(v)
