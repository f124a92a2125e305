"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- recipients: 수령인 설정/조회
- balances: 계정 잔고, 보유 현황
- transfers: 입금, withdraw, transfer-all
- events: 이벤트 조회
"""
