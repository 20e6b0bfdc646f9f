#!/usr/bin/env python3
"""
드랍쉬핑 카탈로그 연동 CLI
운영자 또는 외부 스케줄러(cron 등)가 작업을 실행하는 진입점
"""

import asyncio
import json
from typing import Any, Dict, Optional, Tuple

import click

from dropship_engine.config import get_settings
from dropship_engine.monitoring import get_logger, setup_logging
from dropship_engine.service import Caller, DropshippingService, OperationResult
from dropship_engine.storage import JSONStorage, MemoryStorage, create_storage

logger = get_logger(__name__)

# CLI 실행은 시스템 관리자 권한으로 수행
SYSTEM_USER_ID = "system:cli"


def _build_service(storage_backend: Optional[str]) -> DropshippingService:
    settings = get_settings()
    if storage_backend == "memory":
        storage = MemoryStorage()
    elif storage_backend == "json":
        storage = JSONStorage(str(settings.local_data_path))
    else:
        storage = create_storage(settings)
    return DropshippingService(storage, settings)


def _system_caller() -> Caller:
    return Caller(user_id=SYSTEM_USER_ID, role=get_settings().admin_role)


def _parse_settings(values: Tuple[str, ...]) -> Dict[str, Any]:
    """key=value 옵션을 딕셔너리로 변환 (값은 JSON으로 해석 가능하면 해석)"""
    parsed: Dict[str, Any] = {}
    for item in values:
        if "=" not in item:
            raise click.BadParameter(f"key=value 형식이 아닙니다: {item}", param_hint="--setting")
        key, raw = item.split("=", 1)
        try:
            parsed[key.strip()] = json.loads(raw)
        except ValueError:
            parsed[key.strip()] = raw
    return parsed


def _emit(result: OperationResult):
    """결과 출력 (실패 시 종료 코드 1)"""
    if result.success:
        click.echo(json.dumps({"success": True, **(result.data or {})}, ensure_ascii=False, indent=2))
        return
    click.echo(
        json.dumps(
            {"success": False, "error": result.error, "error_code": result.error_code},
            ensure_ascii=False,
            indent=2,
        ),
        err=True,
    )
    raise click.exceptions.Exit(1)


@click.group()
@click.option(
    "--storage",
    "storage_backend",
    type=click.Choice(["supabase", "memory", "json"]),
    default=None,
    help="저장소 백엔드 (기본값: 환경 설정)",
)
@click.pass_context
def cli(ctx: click.Context, storage_backend: Optional[str]):
    """드랍쉬핑 카탈로그 연동 CLI"""
    settings = get_settings()
    setup_logging(log_level=settings.log_level, log_file=settings.log_file)
    ctx.ensure_object(dict)
    ctx.obj["storage_backend"] = storage_backend


@cli.command()
@click.option("--provider", required=True, help="공급사 (printful, spocket, dropcommerce, mock_api)")
@click.option("--api-key", required=True, help="API 키")
@click.option("--api-secret", default=None, help="API 시크릿")
@click.option("--setting", "settings_", multiple=True, help="공급사 추가 설정 (key=value)")
@click.pass_context
def configure(ctx, provider: str, api_key: str, api_secret: Optional[str], settings_):
    """공급사 API 설정 등록"""
    service = _build_service(ctx.obj["storage_backend"])
    request = {
        "provider": provider,
        "api_key": api_key,
        "api_secret": api_secret,
        "settings": _parse_settings(settings_),
    }
    _emit(asyncio.run(service.configure_api(_system_caller(), request)))


@cli.command(name="import")
@click.option("--category", default=None, help="내부 카테고리 필터")
@click.option("--limit", type=int, default=None, help="최대 조회 개수")
@click.pass_context
def import_products(ctx, category: Optional[str], limit: Optional[int]):
    """공급사 상품 가져오기"""
    logger.info(f"상품 가져오기 실행: category={category}, limit={limit}")
    service = _build_service(ctx.obj["storage_backend"])
    request = {"category": category, "limit": limit}
    _emit(asyncio.run(service.import_products(_system_caller(), request)))


@cli.command()
@click.pass_context
def sync(ctx):
    """재고 동기화"""
    logger.info("재고 동기화 실행")
    service = _build_service(ctx.obj["storage_backend"])
    _emit(asyncio.run(service.sync_inventory(_system_caller())))


@cli.command()
@click.argument("order_file", type=click.File("r", encoding="utf-8"))
@click.pass_context
def fulfill(ctx, order_file):
    """공급사 주문 전달 (주문 JSON 파일, '-'는 표준 입력)"""
    try:
        order = json.load(order_file)
    except ValueError as e:
        raise click.BadParameter(f"주문 JSON 파싱 실패: {e}", param_hint="ORDER_FILE")
    service = _build_service(ctx.obj["storage_backend"])
    _emit(asyncio.run(service.fulfill_order(_system_caller(), order)))


@cli.command()
@click.option("--provider", default=None, help="공급사 필터")
@click.option("--limit", type=int, default=None, help="최대 개수")
@click.pass_context
def products(ctx, provider: Optional[str], limit: Optional[int]):
    """활성 카탈로그 조회"""
    service = _build_service(ctx.obj["storage_backend"])
    request = {"provider": provider, "limit": limit}
    _emit(asyncio.run(service.get_products(_system_caller(), request)))


@cli.command(name="order-status")
@click.argument("order_id")
@click.pass_context
def order_status(ctx, order_id: str):
    """주문 전달 상태 조회"""
    service = _build_service(ctx.obj["storage_backend"])
    _emit(asyncio.run(service.get_order_status(_system_caller(), {"order_id": order_id})))


@cli.command()
def serve():
    """API 서버 실행"""
    from dropship_engine.api.main import run

    run()


if __name__ == "__main__":
    cli()
