"""
Feature modules. Each one follows the same layout:

- domain: models, repository interfaces and services
- infrastructure: Supabase repositories and external API clients
- presentation: FastAPI routers and request/response schemas
"""
