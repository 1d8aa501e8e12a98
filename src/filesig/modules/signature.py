# 기본 시그니처 검사 모듈입니다. filesig의 기본 (주요) 기능입니다.
import filesig.core.common
from filesig.core.magic import Magic, SignatureDatabase
from filesig.core.exceptions import ModuleException
from filesig.core.module import Module, Kwarg

class Signature(Module):

    TITLE = "Signature Scan"
    ORDER = 10

    # 시그니처 정의 파일은 현재 작업 디렉토리에서 읽습니다.
    MAGIC_FILE = "file_sig.data"

    # signature와 magic은 API 전용 옵션입니다.
    KWARGS = [
        Kwarg(name='enabled', default=False, option='signature'),
        Kwarg(name='magic_file', default=MAGIC_FILE, option='magic'),
    ]

    # 시그니처 요약 라인: 전체 시그니처 수와 활성 시그니처 이름 목록
    HEADER_FORMAT = "filesig_length = %d :%s\n"
    RESULT_FORMAT = "File type of %s is %s.\n"
    RESULT = ["name", "description"]

    def init(self):
        # 시그니처 정의 파일을 열 수 없으면 검사를 시작할 수 없습니다.
        try:
            self.database = SignatureDatabase.load(self.magic_file)
        except (IOError, OSError) as e:
            raise ModuleException("%s open error: %s" % (self.magic_file, e.strerror or str(e)))

        filesig.core.common.debug("%s에서 %d개의 시그니처를 로드했습니다" % (self.magic_file, len(self.database)))

        self.magic = Magic(self.database)

        self.HEADER = [len(self.database),
                       "".join([" [%s]" % name for name in self.database.names()])]

    def scan_file(self, fp):
        try:
            (data, dlen) = fp.read_block()
        except (IOError, OSError) as e:
            # 읽을 수 없는 파일은 결과 없이 건너뜁니다.
            filesig.core.common.debug("파일 %s를 읽을 수 없습니다: %s" % (fp.name, str(e)))
            return None

        r = self.magic.match(data, dlen)
        if r is not None:
            r.file = fp
            r.name = fp.name
            self.result(r=r)

        return r

    def run(self):
        self.header()

        # 대상 경로가 없으면 사용법을 출력합니다.
        if not self.config.target_files:
            self.config.display.usage(self.parent.help())
            return True

        for fp in iter(self.next_file, None):
            self.scan_file(fp)

        return True
