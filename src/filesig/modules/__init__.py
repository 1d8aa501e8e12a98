# 필수 모듈들 로드
from filesig.modules.signature import Signature   # 시그니처 검사 모듈
from filesig.modules.general import General       # 대상 경로 및 출력 처리 모듈
