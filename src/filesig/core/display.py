# 결과를 화면에 출력하고 로그 파일에 기록하는 작업을 처리하는 코드.
# filesig에서 결과를 화면에 출력하는 모든 작업은 이 클래스를 사용해야 합니다.

import sys

class Display(object):

    '''
    출력 및 로그 파일 기록을 처리하는 클래스.
    이 클래스는 General 모듈에 의해 인스턴스화되며, 대부분의 모듈에서 직접 호출할 필요는 없습니다.
    '''
    DEFAULT_FORMAT = "%s\n"

    def __init__(self, quiet=False, log=None):
        self.quiet = quiet  # 화면 출력 억제 여부
        self.fp = None  # 로그 파일 포인터

        self.format_strings(self.DEFAULT_FORMAT, self.DEFAULT_FORMAT)

        if log:
            self.fp = open(log, "a")  # 로그 파일 열기

    def close(self):
        if self.fp:
            self.fp.close()
            self.fp = None

    def _fix_unicode(self, line):
        '''
        출력 인코딩으로 표현할 수 없는 문자(예: 디코딩할 수 없는 파일 이름)를 대체 문자로 바꿉니다.
        '''
        encoding = getattr(sys.stdout, 'encoding', None) or 'utf-8'
        return line.encode(encoding, 'replace').decode(encoding)

    def format_strings(self, header, result):
        '''
        헤더와 결과 포맷을 설정합니다.
        '''
        self.result_format = result
        self.header_format = header

    def log(self, line):
        '''
        로그 파일에 결과를 기록합니다.
        '''
        if self.fp:
            try:
                self.fp.write(line)
            except UnicodeEncodeError:
                self.fp.write(self._fix_unicode(line))

            self.fp.flush()

    def header(self, *args):
        '''
        출력의 헤더(시그니처 요약 라인)를 처리합니다.
        '''
        self._fprint(self.header_format, args)

    def usage(self, text):
        '''
        사용법 문자열을 출력합니다.
        '''
        self._fprint("%s", [text])

    def result(self, *args):
        '''
        결과를 출력합니다.
        '''
        self._fprint(self.result_format, args)

    def _fprint(self, fmt, columns, stdout=True):
        '''
        실제로 출력 작업을 수행하는 내부 함수입니다.
        '''
        line = fmt % tuple(columns)

        if not self.quiet and stdout:
            try:
                try:
                    sys.stdout.write(line)
                except UnicodeEncodeError:
                    sys.stdout.write(self._fix_unicode(line))
                sys.stdout.flush()
            except BrokenPipeError:
                pass

        self.log(line)
