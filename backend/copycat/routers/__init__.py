# copycat/routers/__init__.py
from .launch import router as launch_router

__all__ = ["launch_router"]
