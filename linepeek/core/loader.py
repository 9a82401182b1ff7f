from __future__ import annotations
import importlib
import pkgutil
from typing import Dict, Optional

from ..exporters.base import ExporterPlugin

DEFAULT_EXPORTER = "rtf"


def discover_exporter_plugins() -> Dict[str, ExporterPlugin]:
    """Instantiate every ExporterPlugin subclass found in linepeek.exporters, keyed by NAME."""
    from .. import exporters as exporters_pkg  # lazy import
    plugins: Dict[str, ExporterPlugin] = {}
    for info in pkgutil.iter_modules(exporters_pkg.__path__, exporters_pkg.__name__ + "."):
        module = importlib.import_module(info.name)
        for value in vars(module).values():
            if not isinstance(value, type) or value is ExporterPlugin or not issubclass(value, ExporterPlugin):
                continue
            name = value.NAME.lower()
            # aliases (RTF = RTFExporter) resolve to the same class
            if name not in plugins:
                plugins[name] = value()
    return plugins


def select_exporter(all_plugins: Dict[str, ExporterPlugin], name: Optional[str]) -> Optional[ExporterPlugin]:
    name = (name or DEFAULT_EXPORTER).strip().lower()
    return all_plugins.get(name)
