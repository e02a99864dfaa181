from fastapi import Request
from config import Settings
from redis_client import ContentCache
from services.partitioner import QuarterPartitioner

# Collaborators are built in main.lifespan and live on app.state;
# tests swap them via app.dependency_overrides.


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_cache(request: Request) -> ContentCache:
    return request.app.state.cache


def get_partitioner(request: Request) -> QuarterPartitioner:
    return request.app.state.partitioner
