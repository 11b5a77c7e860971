"""
Server modules for the Globe Map application.

This package contains FastAPI router modules for the post feed, stateless
render endpoint, admin configuration and SSE broadcasting.

Date: 2026-10-18
"""
