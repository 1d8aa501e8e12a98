__all__ = ['Magic', 'SignatureDatabase', 'SignatureEntry', 'SignatureResult']

import re
import filesig.core.common
from filesig.core.module import Result
from filesig.core.exceptions import ParserException

class SignatureResult(Result):
    '''
    시그니처 결과를 저장하는 클래스입니다.
    description에는 일치한 시그니처의 타입 이름이 들어갑니다.
    '''

    def __init__(self, **kwargs):
        # 일치한 시그니처 항목과 데이터베이스 내 순서입니다.
        self.signature = None
        self.id = 0

        # kwargs가 위의 기본값을 덮어씁니다.
        super(SignatureResult, self).__init__(**kwargs)


class SignatureEntry(object):
    '''
    시그니처 정의 파일의 한 줄을 파싱하는 클래스입니다.

        <공백으로 구분된 16진수 바이트>|<타입 이름>
        FF D8 FF|JPEG
        #00 00 01 BA|MPEG
    '''

    # 시그니처 바이트 패턴의 최대 길이
    MAX_PATTERN_SIZE = 128
    # 타입 이름은 이 길이로 잘립니다.
    MAX_NAME_SIZE = 63

    COMMENT = '#'
    DELIMITER = '|'

    # C의 strtoul(token, NULL, 16)이 받아들이는 접두부와 같은 형태입니다.
    HEX_TOKEN = re.compile(r'\s*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]*)')
    ULONG_MAX = 0xFFFFFFFFFFFFFFFF

    def __init__(self, line):
        '''
        클래스 생성자입니다. 시그니처 정의 파일의 라인을 파싱합니다.

        @line - 줄바꿈 문자가 제거된 시그니처 정의 파일의 한 줄.

        반환값은 없습니다.
        '''
        self.text = line

        # 라인 전체가 '#'로 시작하는 경우에만 주석(비활성) 항목입니다.
        # 주석 항목도 파싱되어 데이터베이스 슬롯을 차지하지만, 매칭에는 사용되지 않습니다.
        self.active = not line.startswith(self.COMMENT)

        if self.DELIMITER not in line:
            raise ParserException("'%s' 구분자가 없는 시그니처 라인: '%s'" % (self.DELIMITER, line))

        (hex_part, name_part) = line.split(self.DELIMITER, 1)

        self.type_name = name_part[:self.MAX_NAME_SIZE]
        self.pattern = self._parse_pattern(hex_part)

    def __len__(self):
        return len(self.pattern)

    def __repr__(self):
        return "%s(%r)" % (self.__class__.__name__, self.text)

    def _parse_pattern(self, text):
        '''
        공백으로 구분된 16진수 토큰 목록을 바이트 패턴으로 변환합니다.

        @text - 라인의 16진수 부분.

        bytes 객체를 반환합니다.
        '''
        pattern = bytearray()

        for token in text.split():
            # 바이트 목록 안의 '#'는 주석 표시가 아니라 데이터 앞에 붙은 문자일 뿐입니다.
            if token.startswith(self.COMMENT):
                token = token[1:]
                # '#' 단독 토큰은 바이트를 만들지 않습니다.
                if not token:
                    continue
            pattern.append(self.hex_byte(token))

        if len(pattern) > self.MAX_PATTERN_SIZE:
            filesig.core.common.warning("시그니처 '%s'의 패턴이 %d 바이트로 잘렸습니다" % (self.text, self.MAX_PATTERN_SIZE))
            del pattern[self.MAX_PATTERN_SIZE:]

        return bytes(pattern)

    @classmethod
    def hex_byte(cls, token):
        '''
        16진수 토큰을 한 바이트 값으로 변환합니다. 잘못된 입력에 대해서도 예외를 발생시키지 않습니다.

        @token - 변환할 토큰 (예: 'FF', '0x4d', 'zz').

        0에서 255 사이의 정수를 반환합니다.
        '''
        (sign, digits) = cls.HEX_TOKEN.match(token).groups()

        # 16진수 숫자가 하나도 없으면 0입니다.
        if not digits:
            return 0

        value = int(digits, 16)

        # 범위를 넘는 값은 ULONG_MAX로 포화됩니다.
        if value > cls.ULONG_MAX:
            return 0xFF

        if sign == '-':
            value = -value

        return value & 0xFF


class SignatureDatabase(object):
    '''
    시그니처 정의 파일에서 로드된, 순서가 있는 읽기 전용 시그니처 목록입니다.
    파일 내 순서가 곧 매칭 우선순위입니다.
    '''

    # 이 개수를 넘는 시그니처 라인은 읽지 않습니다.
    MAX_SIGNATURES = 100

    def __init__(self, entries=()):
        self.entries = tuple(entries)[:self.MAX_SIGNATURES]

    def __len__(self):
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    def __getitem__(self, index):
        return self.entries[index]

    @property
    def active(self):
        '''
        매칭에 참여하는 (주석이 아닌) 시그니처 항목 목록입니다.
        '''
        return tuple(entry for entry in self.entries if entry.active)

    def names(self):
        return [entry.type_name for entry in self.active]

    @classmethod
    def load(cls, fname):
        '''
        파일에서 시그니처를 로드합니다.

        @fname - 시그니처 정의 파일의 경로.

        SignatureDatabase 인스턴스를 반환합니다.
        파일을 열 수 없으면 IOError가 그대로 전파됩니다.
        '''
        with open(fname, "r", errors="replace") as fp:
            return cls.parse(fp)

    @classmethod
    def parse(cls, lines):
        '''
        시그니처 정의 파일의 라인들을 파싱합니다.

        @lines - 시그니처 정의 파일의 라인 목록 (또는 열린 파일 객체).

        SignatureDatabase 인스턴스를 반환합니다.
        '''
        entries = []

        for line in lines:
            line = line.rstrip('\r\n')
            if not line:
                continue

            if len(entries) >= cls.MAX_SIGNATURES:
                filesig.core.common.debug("시그니처 최대 개수(%d)에 도달하여 나머지 라인을 무시합니다" % cls.MAX_SIGNATURES)
                break

            try:
                entries.append(SignatureEntry(line))
            except ParserException as e:
                filesig.core.common.debug(str(e))

        return cls(entries)


class Magic(object):
    '''
    시그니처 데이터베이스를 사용하여 데이터 버퍼의 파일 타입을 식별하는 클래스입니다.
    '''

    def __init__(self, database):
        '''
        클래스 생성자입니다.

        @database - SignatureDatabase 인스턴스.

        반환값은 없습니다.
        '''
        self.database = database

    def _find(self, entry, data, dlen):
        '''
        데이터 버퍼의 모든 오프셋에서 시그니처 패턴을 검색합니다.

        @entry - 검색할 SignatureEntry.
        @data  - 검색할 데이터.
        @dlen  - 검색할 데이터의 길이.

        패턴이 처음 발견된 오프셋을 반환하고, 없으면 -1을 반환합니다.
        '''
        # 길이가 0인 패턴은 오프셋 0에서 항상 일치합니다.
        # 그 외의 패턴은 0 <= offset <= dlen - len(pattern) 범위에서만 일치할 수 있습니다.
        return data.find(entry.pattern, 0, dlen)

    def match(self, data, dlen=None):
        '''
        데이터 버퍼를 로드된 시그니처와 비교합니다.

        @data - 파일의 앞부분 데이터.
        @dlen - 지정된 경우, 데이터의 처음 dlen 바이트만 검사합니다.

        데이터베이스 순서상 처음 일치한 시그니처의 SignatureResult를 반환합니다.
        일치하는 시그니처가 없으면 None을 반환합니다.
        '''
        if dlen is None or dlen > len(data):
            dlen = len(data)

        for (sid, entry) in enumerate(self.database):
            if not entry.active:
                continue

            # 데이터보다 긴 시그니처는 일치할 수 없습니다.
            if len(entry.pattern) > dlen:
                continue

            offset = self._find(entry, data, dlen)
            if offset >= 0:
                return SignatureResult(id=sid,
                                       offset=offset,
                                       size=len(entry.pattern),
                                       description=entry.type_name,
                                       signature=entry)

        return None
