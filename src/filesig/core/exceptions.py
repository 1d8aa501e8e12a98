class ParserException(Exception):

    '''
    시그니처 정의 파일 파싱 오류와 관련된 예외입니다.
    시그니처 라인에 '|' 구분자가 없는 경우 발생하며, 해당 라인은 데이터베이스에 추가되지 않습니다.
    '''
    pass


class ModuleException(Exception):

    '''
    모듈 예외 클래스.
    이름 외에는 특별한 기능이 없습니다.
    시그니처 정의 파일을 열 수 없는 것과 같은 치명적인 모듈 오류에 사용됩니다.
    '''
    pass


class IgnoreFileException(Exception):

    '''
    대상 파일을 열 수 없어 조용히 건너뛰어야 하는 경우 발생하는 예외입니다.
    '''
    pass
