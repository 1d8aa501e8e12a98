# 설치된 filesig 배포판의 메타데이터에서 패키지 버전을 가져옵니다.
from importlib import metadata

def get_version():
    try:
        return metadata.version("filesig")
    except metadata.PackageNotFoundError:
        # 설치되지 않은 소스 트리에서 직접 임포트된 경우
        return "0.0.0"

__version__ = get_version()
