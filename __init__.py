"""
Globe Map application.

A FastAPI service around the map post engine: decides which geotagged posts
are shown, how transparent they are, and where their cards are drawn so they
never overlap.

Date: 2026-10-18
"""
