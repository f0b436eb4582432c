"""레포지토리 패키지 — 순수 DB 쿼리 계층.

Repository package. One singleton per table family (users/roles, refresh
tokens, mailboxes/messages, activation codes, webhooks, API keys); each
extends BaseRepository and only flushes, never commits.
"""
