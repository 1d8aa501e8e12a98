# filesig 코드 전반에서 사용되는 공통 함수들입니다.

import io
import sys

# __debug__ 값은 기본적으로 True로 설정되어 있지만, Python 인터프리터가 -O 옵션과 함께 실행되면 False로 설정됩니다.
if not __debug__:
    DEBUG = True
else:
    DEBUG = False

def debug(msg):
    '''
    Python 인터프리터가 -O 플래그와 함께 호출된 경우에만 stderr로 디버그 메시지를 출력합니다.
    '''
    if DEBUG:
        sys.stderr.write("DEBUG: " + msg + "\n")
        sys.stderr.flush()

def warning(msg):
    '''
    stderr로 경고 메시지를 출력합니다.
    '''
    sys.stderr.write("\nWARNING: " + msg + "\n")

class PrefixFile(io.FileIO):
    '''
    이진 파일의 앞부분(prefix)만 읽기 위한 클래스.

    filesig는 파일 전체가 아니라 시작부터 최대 self.length 바이트만 검사합니다.
    read_block은 파일 끝에 도달하지 않는 한 self.length 바이트를 모두 읽습니다.
    '''

    def __init__(self, fname, length):
        '''
        클래스 생성자.

        @fname  - 열려는 파일의 경로.
        @length - 읽을 최대 바이트 수.

        반환값 없음.
        '''
        super().__init__(fname, 'r')
        self.length = length

    def read_block(self):
        '''
        파일 시작부터 최대 self.length 바이트를 읽습니다.

        (블록 데이터, 블록 데이터 길이)의 튜플을 반환합니다.
        '''
        data = b''

        # 짧은 읽기가 반환되어도 파일 끝까지는 계속 읽습니다.
        while len(data) < self.length:
            tmp = self.read(self.length - len(data))
            if not tmp:
                break
            data += tmp

        return (data, len(data))
