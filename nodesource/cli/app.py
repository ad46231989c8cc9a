"""
nodesource/cli/app.py - 메인 CLI 엔트리포인트

Click 기반의 CLI 애플리케이션 진입점입니다.

명령어 구조:
    nodesource nodes            # 노드 목록 1회 조회 (table/json/yaml)
    nodesource watch            # get_nodes()를 주기적으로 호출하며 갱신 상태 표시
    nodesource mapping          # 해석된 매핑 출력
    nodesource options          # 지원하는 설정 키 목록

    예시:
    nodesource nodes -p prod -r ap-northeast-2 -f yaml
    nodesource nodes --config /etc/nodesource/prod.properties
    nodesource watch --refresh-interval 10 --every 2 --count 30

Usage:
    $ nodesource --version
    $ python -m nodesource.cli.app nodes
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import datetime
from typing import Any

import click
from rich.table import Table

from nodesource import __version__
from nodesource import config as cfg
from nodesource.exceptions import ConfigError, FetchError
from nodesource.factory import NodeSourceFactory
from nodesource.inventory.coordinator import NodeSource
from nodesource.mapping.resolver import MappingConfigResolver

from .ui.console import configure_logging, console, print_error, print_warning
from .ui.output import OUTPUT_FORMATS, build_table, mapping_to_properties, to_json, to_yaml

logger = logging.getLogger(__name__)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


def source_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """NodeSource 설정 공통 옵션"""
    options = [
        click.option("-c", "--config", "config_file", type=click.Path(dir_okay=False), help="설정 .properties 파일"),
        click.option("-p", "--project", help="AWS 프로파일 (조회 범위)"),
        click.option("-r", "--region", "regions", multiple=True, help="리전 (다중 가능)"),
        click.option("--filter", "filter_params", help="EC2 필터 (세미콜론 구분, name=v1,v2)"),
        click.option("--mapping-file", type=click.Path(dir_okay=False), help="매핑 .properties 파일"),
        click.option("--mapping-params", help="인라인 매핑 (세미콜론 구분 key=value)"),
        click.option("--no-default-mapping", is_flag=True, help="내장 기본 매핑 사용 안 함"),
        click.option("--all-states", is_flag=True, help="running 이외 상태의 인스턴스 포함"),
        click.option("--refresh-interval", type=int, help="갱신 주기 (초, 음수 = 항상 갱신)"),
        click.option("--sync", "sync_only", is_flag=True, help="비동기 갱신 사용 안 함"),
        click.option("--credentials-file", type=click.Path(dir_okay=False), help="AWS shared credentials 파일"),
    ]

    for option in reversed(options):
        func = option(func)
    return func


def build_properties(
    config_file: str | None = None,
    project: str | None = None,
    regions: tuple[str, ...] = (),
    filter_params: str | None = None,
    mapping_file: str | None = None,
    mapping_params: str | None = None,
    no_default_mapping: bool = False,
    all_states: bool = False,
    refresh_interval: int | None = None,
    sync_only: bool = False,
    credentials_file: str | None = None,
) -> dict[str, str]:
    """설정 파일 + 명령줄 옵션을 properties로 병합 (명령줄 우선)"""
    props: dict[str, str] = cfg.load_config_file(config_file) if config_file else {}

    overrides = {
        cfg.PROJECT: project,
        cfg.REGION: ",".join(regions) if regions else None,
        cfg.FILTER_PARAMS: filter_params,
        cfg.MAPPING_FILE: mapping_file,
        cfg.MAPPING_PARAMS: mapping_params,
        cfg.REFRESH_INTERVAL: str(refresh_interval) if refresh_interval is not None else None,
        cfg.CREDENTIALS_FILE: credentials_file,
    }
    props.update({key: value for key, value in overrides.items() if value is not None})

    if no_default_mapping:
        props[cfg.USE_DEFAULT_MAPPING] = "false"
    if all_states:
        props[cfg.RUNNING_ONLY] = "false"
    if sync_only:
        props[cfg.QUERY_ASYNC] = "false"
    return props


def _load_properties(options: dict[str, Any]) -> dict[str, str]:
    try:
        return build_properties(**options)
    except ConfigError as e:
        print_error(str(e))
        raise click.exceptions.Exit(2) from e


def create_source(options: dict[str, Any]) -> NodeSource:
    return NodeSourceFactory().create_source(_load_properties(options))


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__, prog_name="nodesource")
@click.option("-v", "--verbose", count=True, help="로그 상세도 (-v INFO, -vv DEBUG)")
def cli(verbose: int) -> None:
    """EC2 인벤토리 노드 소스"""
    configure_logging(verbose)


@cli.command("nodes")
@source_options
@click.option("-f", "--format", "output_format", type=click.Choice(OUTPUT_FORMATS), default="table")
def nodes_command(output_format: str, **options: Any) -> None:
    """노드 목록을 1회 조회하여 출력"""
    with create_source(options) as source:
        try:
            nodes = source.get_nodes()
        except FetchError as e:
            print_error(f"인벤토리 조회 실패: {e}")
            raise click.exceptions.Exit(1) from e

    if output_format == "json":
        click.echo(to_json(nodes))
    elif output_format == "yaml":
        click.echo(to_yaml(nodes), nl=False)
    else:
        console.print(build_table(nodes, title=f"Nodes ({len(nodes)})"))


@cli.command("watch")
@source_options
@click.option("--every", type=float, default=5.0, show_default=True, help="get_nodes() 호출 간격 (초)")
@click.option("--count", type=int, default=0, help="호출 횟수 (0 = 중단할 때까지)")
def watch_command(every: float, count: int, **options: Any) -> None:
    """get_nodes()를 주기적으로 호출하며 갱신 상태 표시"""
    polls = 0
    with create_source(options) as source:
        try:
            while count <= 0 or polls < count:
                if polls:
                    time.sleep(every)
                polls += 1
                try:
                    nodes = source.get_nodes()
                except FetchError as e:
                    print_warning(f"조회 실패: {e}")
                    continue
                stamp = datetime.now().strftime("%H:%M:%S")
                console.print(f"[dim]{stamp}[/dim] state={source.state} nodes={len(nodes)}")
        except KeyboardInterrupt:
            console.print("[dim]중단됨[/dim]")


@cli.command("mapping")
@source_options
def mapping_command(**options: Any) -> None:
    """기본값/파일/인라인 매핑을 병합한 결과 출력"""
    source_config = cfg.SourceConfig.from_properties(_load_properties(options))
    mapping = MappingConfigResolver().resolve(
        source_config.use_default_mapping,
        source_config.mapping_file,
        source_config.mapping_params,
    )
    click.echo(mapping_to_properties(mapping))


@cli.command("options")
def options_command() -> None:
    """지원하는 설정 키 목록"""
    table = Table(title=f"{NodeSourceFactory.PROVIDER_NAME} options")
    table.add_column("key")
    table.add_column("type")
    table.add_column("default")
    table.add_column("description", overflow="fold")
    for option in NodeSourceFactory().describe():
        table.add_row(option.key, option.type, option.default or "-", option.description)
    console.print(table)


if __name__ == "__main__":
    cli()
