import os
import shutil
import tempfile
import filesig
from unittest import mock
from nose.tools import eq_, ok_, assert_raises

input_vectors = os.path.join(os.path.dirname(__file__), "input-vectors")
magic_file = os.path.join(input_vectors, "file_sig.data")
images = os.path.join(input_vectors, "images")

def _write(path, data):
    with open(path, "wb") as fp:
        fp.write(data)

def test_directory_scan():
    '''
    테스트: images 디렉토리를 재귀적으로 검사합니다.
    식별된 파일만 결과에 포함되는지 확인합니다.
    '''
    expected_results = [
        [os.path.join(images, "a.jpg"), 'JPEG'],
        [os.path.join(images, "b.png"), 'PNG'],
        [os.path.join(images, "nested", "c.png"), 'PNG'],
    ]

    scan_result = filesig.scan(images,
                               signature=True,
                               magic=magic_file,
                               quiet=True)

    # 사용된 모듈의 개수를 테스트합니다.
    eq_(len(scan_result), 1)

    # 시그니처 데이터베이스 요약
    eq_(len(scan_result[0].database), 2)
    eq_(scan_result[0].database.names(), ['JPEG', 'PNG'])

    # notes.txt는 어떤 시그니처와도 일치하지 않습니다.
    eq_(len(scan_result[0].results), len(expected_results))

    for i in range(0, len(scan_result[0].results)):
        eq_(scan_result[0].results[i].name, expected_results[i][0])
        eq_(scan_result[0].results[i].description, expected_results[i][1])
        eq_(scan_result[0].results[i].offset, 0)

def test_single_file_scan():
    scan_result = filesig.scan(os.path.join(images, "b.png"),
                               signature=True,
                               magic=magic_file,
                               quiet=True)

    eq_(len(scan_result[0].results), 1)
    eq_(scan_result[0].results[0].description, 'PNG')

def test_unidentified_file():
    scan_result = filesig.scan(os.path.join(images, "notes.txt"),
                               signature=True,
                               magic=magic_file,
                               quiet=True)

    eq_(len(scan_result), 1)
    eq_(scan_result[0].results, [])

def test_missing_target():
    '''
    테스트: 존재하지 않는 경로는 오류가 아니라 결과 없이 처리되는지 확인합니다.
    '''
    scan_result = filesig.scan(os.path.join(input_vectors, "does-not-exist"),
                               signature=True,
                               magic=magic_file,
                               quiet=True)

    eq_(len(scan_result), 1)
    eq_(scan_result[0].results, [])
    eq_(scan_result[0].config.target_files, [])

def test_missing_magic_file():
    '''
    테스트: 시그니처 정의 파일을 열 수 없으면 치명적인 오류가 발생하는지 확인합니다.
    '''
    assert_raises(filesig.ModuleException,
                  filesig.scan,
                  images,
                  signature=True,
                  magic=os.path.join(input_vectors, "missing.data"),
                  quiet=True)

def test_prefix_length():
    '''
    테스트: 검사하는 파일 앞부분의 크기를 넘어선 위치의 시그니처는 발견되지 않는지 확인합니다.
    '''
    tmpdir = tempfile.mkdtemp()
    try:
        _write(os.path.join(tmpdir, "far.bin"), b'\x00' * 1024 + b'\xff\xd8\xff')
        _write(os.path.join(tmpdir, "near.bin"), b'\x00' * 1021 + b'\xff\xd8\xff')
        _write(os.path.join(tmpdir, "empty.bin"), b'')

        results = filesig.scan(tmpdir, signature=True, magic=magic_file, quiet=True)[0].results
        eq_([os.path.basename(r.name) for r in results], ["near.bin"])
        eq_(results[0].offset, 1021)
    finally:
        shutil.rmtree(tmpdir)

def test_symlinks_are_skipped():
    tmpdir = tempfile.mkdtemp()
    try:
        _write(os.path.join(tmpdir, "real.jpg"), b'\xff\xd8\xff\xe0')
        os.symlink(os.path.join(tmpdir, "real.jpg"), os.path.join(tmpdir, "link.jpg"))
        os.symlink(os.path.join(tmpdir, "missing"), os.path.join(tmpdir, "dangling"))

        results = filesig.scan(tmpdir, signature=True, magic=magic_file, quiet=True)[0].results
        eq_([os.path.basename(r.name) for r in results], ["real.jpg"])

        # 끊어진 심볼릭 링크도 존재하는 경로로 취급되지만 검사할 파일은 없습니다.
        module = filesig.scan(os.path.join(tmpdir, "dangling"), signature=True, magic=magic_file, quiet=True)[0]
        eq_(len(module.config.target_files), 1)
        eq_(module.results, [])
    finally:
        shutil.rmtree(tmpdir)

def test_log_file():
    '''
    테스트: quiet 모드에서도 로그 파일에 모든 출력 라인이 기록되는지 확인합니다.
    '''
    tmpdir = tempfile.mkdtemp()
    try:
        log_file = os.path.join(tmpdir, "scan.log")

        filesig.scan(os.path.join(images, "a.jpg"),
                     signature=True,
                     magic=magic_file,
                     quiet=True,
                     log=log_file)

        with open(log_file, "r") as fp:
            lines = fp.read().splitlines()

        eq_(lines, ["filesig_length = 2 : [JPEG] [PNG]",
                    "File type of %s is JPEG." % os.path.join(images, "a.jpg")])
    finally:
        shutil.rmtree(tmpdir)


def test_unreadable_file_is_skipped():
    '''
    테스트: 열 수 없는 파일은 건너뛰고 나머지 파일은 계속 검사되는지 확인합니다.
    '''
    tmpdir = tempfile.mkdtemp()
    real_prefix_file = filesig.core.common.PrefixFile

    def open_prefix(fname, length):
        if os.path.basename(fname) == "b.jpg":
            raise PermissionError(13, "Permission denied", fname)
        return real_prefix_file(fname, length)

    try:
        for name in ["a.jpg", "b.jpg", "c.jpg"]:
            _write(os.path.join(tmpdir, name), b'\xff\xd8\xff\xe0')

        with mock.patch("filesig.core.common.PrefixFile", side_effect=open_prefix):
            module = filesig.scan(tmpdir, signature=True, magic=magic_file, quiet=True)[0]

        eq_([os.path.basename(r.name) for r in module.results], ["a.jpg", "c.jpg"])
        eq_(module.errors, [])
    finally:
        shutil.rmtree(tmpdir)

def test_unlistable_directory_is_skipped():
    '''
    테스트: 열 수 없는 디렉토리의 하위 트리만 건너뛰고 형제 항목은 계속 검사되는지 확인합니다.
    '''
    tmpdir = tempfile.mkdtemp()
    real_listdir = os.listdir

    def listdir(path):
        if os.path.basename(path) == "locked":
            raise PermissionError(13, "Permission denied", path)
        return real_listdir(path)

    try:
        os.mkdir(os.path.join(tmpdir, "locked"))
        os.mkdir(os.path.join(tmpdir, "open"))
        _write(os.path.join(tmpdir, "locked", "hidden.png"), b'\x89PNG\r\n\x1a\n')
        _write(os.path.join(tmpdir, "open", "seen.png"), b'\x89PNG\r\n\x1a\n')
        _write(os.path.join(tmpdir, "z.jpg"), b'\xff\xd8\xff\xe0')

        with mock.patch("os.listdir", side_effect=listdir):
            results = filesig.scan(tmpdir, signature=True, magic=magic_file, quiet=True)[0].results

        eq_([os.path.relpath(r.name, tmpdir) for r in results],
            [os.path.join("open", "seen.png"), "z.jpg"])
    finally:
        shutil.rmtree(tmpdir)

def test_special_files_are_skipped():
    '''
    테스트: FIFO 같은 일반 파일이 아닌 항목은 열지 않고 건너뛰는지 확인합니다.
    '''
    tmpdir = tempfile.mkdtemp()
    try:
        os.mkfifo(os.path.join(tmpdir, "pipe"))
        _write(os.path.join(tmpdir, "q.png"), b'\x89PNG\r\n\x1a\n')

        results = filesig.scan(tmpdir, signature=True, magic=magic_file, quiet=True)[0].results
        eq_([os.path.basename(r.name) for r in results], ["q.png"])
    finally:
        shutil.rmtree(tmpdir)

def test_magic_file_from_working_directory():
    '''
    테스트: magic 옵션이 없으면 현재 작업 디렉토리의 file_sig.data만 사용되는지 확인합니다.
    '''
    tmpdir = tempfile.mkdtemp()
    cwd = os.getcwd()
    try:
        os.chdir(tmpdir)
        _write(os.path.join(tmpdir, "x.bin"), b'\x00\x11\x22')

        # 현재 디렉토리에 정의 파일이 없으면 치명적인 오류입니다.
        assert_raises(filesig.ModuleException,
                      filesig.scan, tmpdir, signature=True, quiet=True)

        _write(os.path.join(tmpdir, "file_sig.data"), b"11 22|LOCAL\n")
        module = filesig.scan(tmpdir, signature=True, quiet=True)[0]

        eq_(module.magic_file, "file_sig.data")
        eq_(module.database.names(), ['LOCAL'])
        eq_([(os.path.basename(r.name), r.description) for r in module.results],
            [("x.bin", "LOCAL")])
    finally:
        os.chdir(cwd)
        shutil.rmtree(tmpdir)

def test_unknown_option():
    '''
    테스트: 정의되지 않은 API 옵션은 거부되는지 확인합니다.
    '''
    assert_raises(filesig.ModuleException,
                  filesig.scan, images, signature=True, magic=magic_file, quiet=True, length=16)

def test_version():
    ok_(isinstance(filesig.__version__, str))
