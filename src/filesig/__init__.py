__all__ = ['scan', 'execute', 'Modules', 'ModuleException']

from filesig.core.module import Modules
from filesig.core.version import __version__
from filesig.core.exceptions import ModuleException

# 편의 함수들
def scan(*args, **kwargs):
    with Modules(*args, **kwargs) as m:
        objs = m.execute()
    return objs

# 'execute' 함수는 'scan' 함수를 호출하는 편의 함수로, 동일한 기능을 합니다.
def execute(*args, **kwargs):
    return scan(*args, **kwargs)
