# filesig 모듈 프레임워크입니다.
# 모든 검사 모듈의 기본 클래스인 Module 클래스와,
# 모듈을 불러와 의존성을 연결하고 실행하는 Modules 클래스가 들어 있습니다.

import sys
import inspect
import traceback
from copy import copy
import filesig.core.common
from filesig.core.exceptions import ModuleException, IgnoreFileException

class Kwarg(object):
    '''
    모듈이 __init__에서 받는 kwarg를 선언하는 컨테이너 클래스입니다.
    '''

    # 명령줄의 위치 인자(대상 경로 목록)를 받는 kwarg를 나타냅니다.
    ARGV = object()

    def __init__(self, name="", default=None, option=None):
        '''
        클래스 생성자.

        @name    - 모듈 속성 이름.
        @default - 기본값.
        @option  - 이 값을 설정하는 API 키워드 이름 (예: filesig.scan(..., magic=...)).
                   Kwarg.ARGV이면 위치 인자 목록을 받고, None이면 외부에서 설정할 수 없습니다.

        반환 값은 없습니다.
        '''
        self.name = name
        self.default = default
        self.option = option

class Dependency(object):
    '''
    모듈 의존성을 선언하기 위한 컨테이너 클래스입니다.
    의존 모듈은 attribute 이름으로 의존하는 모듈에 연결됩니다 (예: self.config).
    '''

    def __init__(self, attribute="", name=""):
        self.attribute = attribute
        self.name = name

class Result(object):
    '''
    검사 결과를 저장하는 일반 클래스입니다.
    '''

    def __init__(self, **kwargs):
        '''
        클래스 생성자.

        @offset      - 시그니처가 발견된 파일 오프셋.
        @size        - 일치한 데이터의 크기.
        @description - 사용자에게 표시될 결과 설명.
        @module      - 결과를 생성한 모듈의 이름.
        @file        - 검사된 파일 객체.
        @name        - 검사된 파일의 경로.

        반환 값은 없습니다.
        '''
        self.offset = 0
        self.size = 0
        self.description = ''
        self.module = ''
        self.file = None
        self.name = None

        for (k, v) in kwargs.items():
            setattr(self, k, v)

class Error(Result):
    '''
    Result와 같은 kwargs에 더해 exception(발생한 예외 객체)을 받습니다.
    '''

    def __init__(self, **kwargs):
        self.exception = None
        Result.__init__(self, **kwargs)

class Module(object):
    '''
    모든 모듈 클래스는 이 클래스를 상속받아야 합니다.
    '''
    TITLE = ""

    # __init__에서 수락되는 filesig.core.module.Kwarg 목록
    KWARGS = []

    # filesig.core.module.Dependency 목록
    DEPENDS = [
        Dependency(name='General', attribute='config'),
    ]

    # 헤더와 각 결과를 출력하기 위한 포맷 문자열입니다.
    HEADER_FORMAT = "%s\n"
    RESULT_FORMAT = "%s\n"

    # 검사를 시작할 때 출력할 헤더 값입니다. None이면 출력하지 않습니다.
    # self.header를 호출하기 전에 설정해야 합니다.
    HEADER = None

    # 결과마다 출력할 Result 속성 이름 목록입니다.
    RESULT = ["description"]

    # 모듈 실행 순서 (작은 값이 먼저 실행됩니다).
    ORDER = 5

    # 주 모듈이 아닌 경우 False로 설정합니다 (예: General 모듈).
    PRIMARY = True

    def __init__(self, parent, **kwargs):
        self.errors = []
        self.results = []

        self.parent = parent
        self.target_file_iter = iter([])
        self.enabled = False
        self.previous_next_file_fp = None
        self.name = self.__class__.__name__

        process_kwargs(self, kwargs)

        try:
            self.load()
        except KeyboardInterrupt:
            raise
        except ModuleException as e:
            self.error(description=str(e))
        except Exception as e:
            self.error(exception=e)

    def load(self):
        '''
        모듈이 로드될 때 호출됩니다.
        '''
        return None

    def unload(self):
        '''
        모듈 실행이 끝난 후 호출됩니다.
        '''
        return None

    def init(self):
        '''
        self.run이 호출되기 전에 호출됩니다.
        '''
        return None

    def run(self):
        '''
        메인 모듈 루틴입니다. 모듈 하위 클래스에서 재정의해야 합니다.

        성공 시 True를 반환하고 실패 시 False를 반환합니다.
        '''
        return False

    def _unload_dependencies(self):
        # 의존 모듈은 의존하는 모듈이 끝날 때까지 유지되어야 하므로
        # Modules.run에서 모듈 자신의 unload와 함께 호출됩니다.
        for dependency in self.DEPENDS:
            try:
                getattr(self, dependency.attribute).unload()
            except AttributeError:
                continue

    def next_file(self):
        '''
        검사할 다음 파일을 가져옵니다. 이전에 반환한 파일은 닫힙니다.

        열린 filesig.core.common.PrefixFile 객체를 반환하고, 더 이상 파일이 없으면 None을 반환합니다.
        '''
        fp = None

        if self.previous_next_file_fp is not None:
            self.previous_next_file_fp.close()

        for next_target_file in self.target_file_iter:
            try:
                fp = self.config.open_file(next_target_file)
            except IgnoreFileException:
                continue
            break

        self.previous_next_file_fp = fp

        return fp

    def result(self, r=None, **kwargs):
        '''
        결과를 self.results에 저장하고 출력합니다.

        @r - 기존의 filesig.core.module.Result 인스턴스. 없으면 kwargs로 새로 만듭니다.

        filesig.core.module.Result 인스턴스를 반환합니다.
        '''
        if r is None:
            r = Result(**kwargs)

        r.module = self.__class__.__name__
        self.results.append(r)

        if self.RESULT:
            self.config.display.format_strings(self.HEADER_FORMAT, self.RESULT_FORMAT)
            self.config.display.result(*[getattr(r, name) for name in self.RESULT])

        return r

    def error(self, **kwargs):
        '''
        오류를 self.errors에 저장하고 stderr로 출력합니다.
        filesig.core.module.Error 클래스와 동일한 kwargs를 수락합니다.
        '''
        exception_header_width = 100

        e = Error(**kwargs)
        e.module = self.__class__.__name__

        self.errors.append(e)

        if e.exception:
            sys.stderr.write("\n" + e.module + " Exception: " + str(e.exception) + "\n")
            sys.stderr.write("-" * exception_header_width + "\n")
            traceback.print_exc(file=sys.stderr)
            sys.stderr.write("-" * exception_header_width + "\n\n")
        elif e.description:
            sys.stderr.write("\n" + e.module + " Error: " + e.description + "\n\n")

    def header(self):
        '''
        self.HEADER와 self.HEADER_FORMAT으로 헤더를 출력합니다.
        '''
        self.config.display.format_strings(self.HEADER_FORMAT, self.RESULT_FORMAT)

        if isinstance(self.HEADER, list):
            self.config.display.header(*self.HEADER)
        elif self.HEADER is not None:
            self.config.display.header(self.HEADER)

    def main(self):
        '''
        self.init을 호출한 뒤 self.run을 호출합니다.

        self.run에서 반환된 값을 반환합니다.
        치명적인 오류(ModuleException)는 호출자에게 전파됩니다.
        '''
        self.target_file_iter = self.config.target_file_names()

        try:
            self.init()
        except KeyboardInterrupt:
            raise
        except ModuleException as e:
            self.error(description=str(e))
            raise
        except Exception as e:
            self.error(exception=e)
            return False

        try:
            retval = self.run()
        except KeyboardInterrupt:
            raise
        except Exception as e:
            self.error(exception=e)
            return False

        return retval

class Modules(object):
    '''
    모듈 실행 및 관리에 사용되는 주요 클래스입니다.
    '''

    def __init__(self, *argv, **options):
        '''
        클래스 생성자.

        @argv    - 대상 경로 목록 (명령줄에서는 sys.argv[1:]).
        @options - API 전용 옵션 (signature, magic, quiet, log).

        반환 값은 없습니다.
        '''
        self.arguments = list(argv)
        self.options = options
        self.executed_modules = {}

    def __enter__(self):
        return self

    def __exit__(self, t, v, b):
        return None

    def list(self):
        '''
        filesig.modules에 등록된 모든 모듈 클래스를 ORDER 순서로 반환합니다.
        '''
        import filesig.modules
        modules = [module for (name, module) in inspect.getmembers(filesig.modules)
                   if inspect.isclass(module) and issubclass(module, Module)]

        return sorted(modules, key=lambda module: module.ORDER)

    def help(self):
        '''
        사용법 문자열을 반환합니다.
        '''
        return "Usage: %s (filename | dirname)\n" % sys.argv[0]

    def _check_options(self):
        known = set()
        for module in self.list():
            known.update(kwarg.option for kwarg in module.KWARGS if isinstance(kwarg.option, str))

        unknown = sorted(set(self.options) - known)
        if unknown:
            raise ModuleException("알 수 없는 옵션: %s" % ", ".join(unknown))

    def execute(self, *args, **kwargs):
        '''
        args/kwargs(또는 생성자에 전달된 값)에 따라 모든 모듈을 실행합니다.

        활성화된 모듈 객체 목록을 반환합니다.
        '''
        run_modules = []
        orig = (self.arguments, self.options)

        if args or kwargs:
            self.arguments = list(args)
            self.options = kwargs

        try:
            self._check_options()

            for module in self.list():
                self.run(module)
        finally:
            (self.arguments, self.options) = orig

        for obj in self.executed_modules.values():
            if obj.enabled and (obj.PRIMARY or obj.results or obj.errors):
                run_modules.append(obj)

        return run_modules

    def run(self, module, dependency=False):
        '''
        특정 모듈을 불러와 활성화되어 있으면 실행합니다.
        '''
        obj = self.load(module)

        # 비활성 모듈도 의존성(예: General의 로그 파일)은 열려 있으므로 항상 언로드합니다.
        try:
            if obj.enabled:
                obj.main()
        finally:
            if not dependency:
                obj._unload_dependencies()
                obj.unload()

        if not dependency:
            self.executed_modules[module] = obj

        return obj

    def load(self, module):
        kwargs = self.kwargs(module)
        kwargs.update(self.dependencies(module))
        return module(self, **kwargs)

    def dependencies(self, module):
        import filesig.modules
        attributes = {}

        for dependency in module.DEPENDS:
            # 의존 모듈은 filesig.modules.__init__.py에서 가져와야 합니다.
            depclass = getattr(filesig.modules, dependency.name, None)
            if depclass is None:
                raise ModuleException("%s는 %s에 의존하지만 filesig.modules에서 찾을 수 없습니다." % (module.__name__, dependency.name))

            depobj = self.run(depclass, dependency=True)

            # 의존성 로드 실패는 복구할 수 없는 오류입니다.
            if depobj.errors:
                raise ModuleException(dependency.name + " 모듈 로드에 실패했습니다.")

            attributes[dependency.attribute] = depobj

        return attributes

    def kwargs(self, module):
        '''
        위치 인자와 API 옵션에서 지정된 모듈의 kwargs를 만듭니다.

        @module - kwargs를 만들 모듈 클래스.

        kwargs 딕셔너리를 반환합니다.
        '''
        kwargs = {'enabled': False}

        for kwarg in module.KWARGS:
            if kwarg.option is Kwarg.ARGV:
                kwargs[kwarg.name] = list(self.arguments)
            elif kwarg.option in self.options:
                kwargs[kwarg.name] = self.options[kwarg.option]

        filesig.core.common.debug("%s :: %s => %s" % (module.TITLE, str(self.arguments), str(kwargs)))
        return kwargs

def process_kwargs(obj, kwargs):
    '''
    모듈 객체에 kwargs를 속성으로 설정합니다. 주어지지 않은 KWARGS 값은 기본값을 사용합니다.

    @obj    - filesig.core.module.Module 하위 클래스의 인스턴스.
    @kwargs - 객체의 __init__ 메서드에 제공된 kwargs.

    반환 값은 없습니다.
    '''
    for kwarg in obj.KWARGS:
        setattr(obj, kwarg.name, kwargs.get(kwarg.name, copy(kwarg.default)))

    for (k, v) in kwargs.items():
        if not hasattr(obj, k):
            setattr(obj, k, v)
