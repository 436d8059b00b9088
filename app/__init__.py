# Must stay import-light: migrations/env.py pulls Base from here without loading services.
from app.shared.models.base import Base

__all__ = ["Base"]
