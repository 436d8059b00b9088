# app/domains/moderation/__init__.py
from importlib import import_module

# Lazy: trust.service imports moderation.repository, which must not drag in the workflow
def __getattr__(name: str):
    if name == "router":
        return import_module(".api", __name__).router
    if name == "register_event_handlers":
        return import_module(".events", __name__).register_event_handlers
    if name == "moderation_workflow":
        return import_module(".service", __name__).moderation_workflow
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
