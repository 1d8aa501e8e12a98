# 대상 경로, 출력 억제, 로그 파일 등 모든 검사에 공통인 설정을 처리하는 모듈입니다.

import os
import stat
import filesig.core.common
import filesig.core.display
from filesig.core.exceptions import IgnoreFileException
from filesig.core.module import Module, Kwarg


class General(Module):

    TITLE = "General"
    ORDER = 0

    DEPENDS = []
    PRIMARY = False

    # 시그니처 검사를 위해 각 파일에서 읽는 최대 바이트 수
    PREFIX_SIZE = 1024

    # 명령줄에서는 위치 인자만 받으며, log와 quiet는 API 전용 옵션입니다.
    KWARGS = [
        Kwarg(name='files', default=[], option=Kwarg.ARGV),
        Kwarg(name='log_file', default=None, option='log'),
        Kwarg(name='quiet', default=False, option='quiet'),
    ]

    def load(self):
        self.target_files = []
        self.display = None

        self._check_target_files()

        self.display = filesig.core.display.Display(log=self.log_file,
                                                    quiet=self.quiet)

    def unload(self):
        if self.display is not None:
            self.display.close()

    def _check_target_files(self):
        '''
        대상 경로가 존재하는지 확인합니다.
        첫 번째 인자만 사용되며, 존재하지 않는 경로는 self.target_files에 추가되지 않습니다.
        '''
        for tfile in self.files[:1]:
            # 심볼릭 링크는 따라가지 않으므로, 끊어진 심볼릭 링크도 존재하는 경로로 취급됩니다.
            try:
                os.lstat(tfile)
            except OSError as e:
                filesig.core.common.debug("대상 경로 %s가 존재하지 않습니다: %s" % (tfile, str(e)))
                continue

            self.target_files.append(tfile)

    def walk(self, path):
        '''
        지정된 경로 아래의 모든 일반 파일을 생성합니다.

        @path - 파일 또는 디렉토리 경로.

        일반 파일이면 그 경로만, 디렉토리이면 하위 디렉토리를 재귀적으로 탐색하여 찾은 모든 일반 파일 경로를 생성합니다.
        소켓, 장치, FIFO, 심볼릭 링크 등은 열지 않고 건너뜁니다.
        '''
        try:
            mode = os.lstat(path).st_mode
        except OSError as e:
            filesig.core.common.debug("%s 정보를 얻을 수 없습니다: %s" % (path, str(e)))
            return

        if stat.S_ISREG(mode):
            yield path
        elif stat.S_ISDIR(mode):
            try:
                names = os.listdir(path)
            except OSError as e:
                # 열 수 없는 디렉토리와 그 하위 트리는 건너뜁니다.
                filesig.core.common.debug("디렉토리 %s를 열 수 없습니다: %s" % (path, str(e)))
                return

            # 출력 순서를 일정하게 유지하기 위해 이름순으로 방문합니다.
            for name in sorted(names):
                for fname in self.walk(os.path.join(path, name)):
                    yield fname

    def target_file_names(self):
        '''
        모든 대상 경로에서 검사할 파일 경로를 생성합니다.
        '''
        for tfile in self.target_files:
            for fname in self.walk(tfile):
                yield fname

    def open_file(self, fname):
        '''
        검사할 파일을 엽니다.

        파일을 열 수 없으면 IgnoreFileException을 발생시킵니다.
        '''
        try:
            return filesig.core.common.PrefixFile(fname, self.PREFIX_SIZE)
        except (IOError, OSError) as e:
            filesig.core.common.debug("파일 %s를 열 수 없습니다: %s" % (fname, str(e)))
            raise IgnoreFileException(str(e))
