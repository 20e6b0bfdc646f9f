"""
CLI 테스트
"""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from dropship_engine.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def cli_settings(test_settings):
    """CLI가 임시 데이터 경로와 테스트 설정을 사용하도록 고정"""
    with patch("dropship_engine.main.get_settings", return_value=test_settings), patch(
        "dropship_engine.main.setup_logging"
    ):
        yield test_settings


def invoke(runner, *args):
    return runner.invoke(cli, ["--storage", "json", *args])


def configure_mock(runner, *extra):
    return invoke(
        runner,
        "configure",
        "--provider",
        "mock_api",
        "--api-key",
        "mock-key",
        "--setting",
        "catalog_size=30",
        *extra,
    )


class TestCli:
    """CLI 명령 테스트"""

    def test_configure(self, runner):
        result = configure_mock(runner)

        assert result.exit_code == 0, result.output
        output = json.loads(result.stdout)
        assert output["success"] is True
        assert output["config"]["api_key"] == "***"
        assert output["config"]["settings"] == {"catalog_size": 30}

    def test_invalid_setting_format(self, runner):
        result = invoke(
            runner, "configure", "--provider", "mock_api", "--api-key", "k", "--setting", "oops"
        )
        assert result.exit_code == 2

    def test_import_without_configuration_fails(self, runner):
        result = invoke(runner, "import")
        assert result.exit_code == 1

    def test_import_sync_and_products(self, runner):
        """상태는 JSON 저장소를 통해 명령 간에 유지됨"""
        assert configure_mock(runner).exit_code == 0

        imported = invoke(runner, "import", "--limit", "10")
        assert imported.exit_code == 0, imported.output
        assert json.loads(imported.stdout)["imported"] == 10

        synced = invoke(runner, "sync")
        assert json.loads(synced.stdout)["updated"] == 10

        listed = invoke(runner, "products", "--limit", "3")
        assert len(json.loads(listed.stdout)["products"]) == 3

    def test_fulfill_and_order_status(self, runner, tmp_path, sample_order):
        assert configure_mock(runner).exit_code == 0
        order_file = tmp_path / "order.json"
        order_file.write_text(json.dumps(sample_order), encoding="utf-8")

        fulfilled = invoke(runner, "fulfill", str(order_file))
        assert fulfilled.exit_code == 0, fulfilled.output
        assert json.loads(fulfilled.stdout)["fulfillmentId"].startswith("MOCK-ORD-")

        status = invoke(runner, "order-status", "ORD-1001")
        assert json.loads(status.stdout)["order"]["status"] == "sent"

    def test_fulfill_invalid_json(self, runner, tmp_path):
        order_file = tmp_path / "order.json"
        order_file.write_text("{broken", encoding="utf-8")

        result = invoke(runner, "fulfill", str(order_file))

        assert result.exit_code == 2
