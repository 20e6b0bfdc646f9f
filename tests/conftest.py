"""
pytest 공통 fixtures 및 설정
"""

import os
import sys
from pathlib import Path
from unittest.mock import MagicMock, Mock

import pytest

# 프로젝트 루트를 Python 경로에 추가
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

# 테스트용 환경 변수 설정 (설정 모듈 import 전에 적용)
os.environ.setdefault("ENV", "test")
os.environ.setdefault("STORAGE_BACKEND", "memory")

from dropship_engine.config import Settings  # noqa: E402
from dropship_engine.service import Caller, DropshippingService  # noqa: E402
from dropship_engine.storage.memory_storage import MemoryStorage  # noqa: E402


@pytest.fixture
def test_settings(tmp_path):
    """테스트 설정"""
    return Settings(
        env="test",
        log_level="DEBUG",
        storage_backend="memory",
        local_data_path=tmp_path / "data",
        http_timeout=5.0,
        max_concurrency=3,
        default_import_limit=50,
        max_import_limit=100,
    )


@pytest.fixture
def storage():
    """메모리 저장소"""
    return MemoryStorage()


@pytest.fixture
def service(storage, test_settings):
    """작업 서비스"""
    return DropshippingService(storage, test_settings)


@pytest.fixture
def admin():
    """관리자 요청자"""
    return Caller(user_id="admin-1", role="admin")


@pytest.fixture
def customer():
    """일반 사용자 요청자"""
    return Caller(user_id="user-1", role="customer")


@pytest.fixture
def mock_settings():
    """Mock 공급사 설정 (카탈로그 30개)"""
    return {"catalog_size": 30}


@pytest.fixture
async def configured_service(service, admin, mock_settings):
    """Mock 공급사가 설정된 작업 서비스"""
    result = await service.configure_api(
        admin, {"provider": "mock_api", "apiKey": "mock-key", "settings": mock_settings}
    )
    assert result.success
    return service


@pytest.fixture
def sample_order():
    """샘플 주문 요청"""
    return {
        "orderId": "ORD-1001",
        "productExternalId": "MOCK-0003",
        "customerInfo": {"name": "Jane Mary Doe", "email": "jane@example.com"},
        "shippingAddress": {
            "fullName": "Jane Mary Doe",
            "street": "1 Main St",
            "city": "Springfield",
            "state": "IL",
            "zipCode": "62701",
            "country": "US",
            "phone": "555-0100",
        },
        "quantity": 2,
    }


@pytest.fixture
def temp_data_dir(tmp_path):
    """임시 데이터 디렉터리"""
    data_dir = tmp_path / "test_data"
    data_dir.mkdir(exist_ok=True)
    return data_dir


@pytest.fixture
def mock_supabase_client():
    """
    Mock Supabase 클라이언트

    쿼리 빌더 메서드는 모두 같은 query 객체를 반환하므로
    query.execute.return_value.data로 결과 행을 지정한다.
    """
    client = Mock()
    query = MagicMock()
    for name in ("select", "insert", "update", "eq", "neq", "order", "limit"):
        getattr(query, name).return_value = query
    query.execute.return_value = Mock(data=[])

    client.table = Mock(return_value=query)
    client.query = query
    return client
