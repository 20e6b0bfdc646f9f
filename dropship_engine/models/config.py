"""
공급사 API 설정 모델
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, SecretStr

MASK = "***"


class ProviderConfig(BaseModel):
    """공급사 인증 정보 및 설정 (추가 전용 기록)"""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    provider: str
    api_key: SecretStr
    api_secret: Optional[SecretStr] = None
    settings: Dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.now)
    superseded_at: Optional[datetime] = None

    def masked(self) -> Dict[str, Any]:
        """인증 정보를 가린 응답용 딕셔너리"""
        data = self.model_dump(mode="json", exclude={"api_key", "api_secret"})
        data["api_key"] = MASK
        data["api_secret"] = MASK if self.api_secret else None
        return data

    def to_record(self) -> Dict[str, Any]:
        """저장소 기록용 딕셔너리 (평문 인증 정보 포함)"""
        data = self.model_dump(mode="json", exclude={"api_key", "api_secret"})
        data["api_key"] = self.api_key.get_secret_value()
        data["api_secret"] = self.api_secret.get_secret_value() if self.api_secret else None
        return data
