import sys
import filesig

def runme():
    # 명령줄에서는 위치 인자만 받습니다. 시그니처 검사는 항상 활성화됩니다.
    with filesig.Modules(*sys.argv[1:], signature=True) as modules:
        try:
            modules.execute()
        except filesig.ModuleException:
            # 오류 메시지는 모듈에서 이미 stderr로 출력되었습니다.
            sys.exit(1)

def main():
    try:
        runme()
    except BrokenPipeError:
        pass
    except KeyboardInterrupt:
        sys.stdout.write("\n")

if __name__ == "__main__":
    main()
