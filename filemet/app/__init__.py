"""
App layer: HTTP 서버 (FastAPI).

역할:
- 에디터/스크립트가 표현식을 보내고 결과를 받는 창구
- 파싱·생성·저장 로직은 core / templates 에 위임
"""
