"""
Backend clients.

Components:
- transport.py: ApiRequest value + decorator pipeline over httpx.AsyncClient
- auth_api.py: POST /auth/login
- task_api.py: /tasks CRUD, filtering and stats
- ai_api.py: /ai/* (status probe, parse, priority, insight, suggestions)
- offline.py: stand-in AI client used when AI is disabled
"""
