from importlib import import_module


def __getattr__(name: str):
    if name == "router":
        return import_module(".api", __name__).router
    if name == "abuse_report_workflow":
        return import_module(".service", __name__).abuse_report_workflow
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
