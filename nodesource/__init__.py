# nodesource/__init__.py
"""
nodesource - EC2 인벤토리 노드 소스

EC2 인스턴스 목록을 주기적으로 조회해 노드 집합으로 제공합니다.
호출자는 매 요청마다 네트워크 지연을 겪지 않고 캐시된 스냅샷을 받습니다.

아키텍처:
    nodesource/
    ├── auth/           # AWS 자격 증명 획득
    ├── mapping/        # 매핑 해석 (기본값 + 파일 + 인라인) 및 노드 매핑
    ├── inventory/      # Node/NodeSet, EC2 조회기, 갱신 캐시 코디네이터
    ├── cli/            # click 명령줄 인터페이스 (rich 출력)
    ├── config.py       # 설정 키 및 SourceConfig
    ├── factory.py      # 설정 설명 및 NodeSource 생성
    └── exceptions.py   # 통합 예외 계층

Usage:
    from nodesource.factory import NodeSourceFactory

    source = NodeSourceFactory().create_source({"project": "prod", "region": "ap-northeast-2"})
    for node in source.get_nodes():
        print(node.name, node.hostname)
"""

from nodesource import auth, config, exceptions, factory, inventory, mapping

__version__ = "1.0.0"

__all__: list[str] = [
    # 서브패키지
    "auth",
    "inventory",
    "mapping",
    # 모듈
    "config",
    "exceptions",
    "factory",
]
