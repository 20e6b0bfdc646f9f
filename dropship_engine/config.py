"""
설정 관리 모듈
환경 변수를 읽어 Pydantic 모델로 변환하여 타입 안전성 보장
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# .env 파일 로드
load_dotenv(dotenv_path=".env", override=False)


class SupabaseConfig(BaseSettings):
    """Supabase 설정"""

    url: str
    service_role_key: str

    model_config = SettingsConfigDict(env_prefix="SUPABASE_", extra="ignore")


class Settings(BaseSettings):
    """전체 애플리케이션 설정"""

    # 환경
    env: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False

    # 로깅
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    # 저장소
    storage_backend: Literal["supabase", "memory", "json"] = "supabase"
    local_data_path: Path = Path("./data")

    # 공급사 호출
    http_timeout: float = Field(default=30.0, gt=0)
    max_concurrency: int = Field(default=5, ge=1)
    default_import_limit: int = Field(default=50, ge=1)
    max_import_limit: int = Field(default=250, ge=1)

    # 인증
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    admin_role: str = "admin"

    # API 서버
    api_host: str = "0.0.0.0"
    api_port: int = 8000

    _supabase: Optional[SupabaseConfig] = None

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("log_file", mode="before")
    @classmethod
    def create_log_path(cls, v):
        if v:
            path = Path(v)
            path.parent.mkdir(parents=True, exist_ok=True)
            return path
        return v

    @property
    def supabase(self) -> Optional[SupabaseConfig]:
        """Supabase 설정 (lazy loading)"""
        if self._supabase is None:
            try:
                self._supabase = SupabaseConfig()
            except ValidationError:
                return None
        return self._supabase

    def is_production(self) -> bool:
        """프로덕션 환경 여부"""
        return self.env == "production"

    def is_development(self) -> bool:
        """개발 환경 여부"""
        return self.env == "development"


@lru_cache()
def get_settings() -> Settings:
    """설정 싱글톤 인스턴스 반환"""
    return Settings()


# 전역 설정 인스턴스
settings = get_settings()
