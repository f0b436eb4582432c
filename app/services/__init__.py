"""서비스 패키지 — 비즈니스 규칙 계층.

Service package. Services enforce role, quota and ownership rules, map
ORM rows to response schemas and raise AppError subclasses; routers commit.
"""
