"""Contest data provider registry."""

from __future__ import annotations

from contestwatch.config import ProviderType
from contestwatch.providers.base import BaseContestProvider

# Lazy registry — classes are imported on first use so the mock backend
# never pulls in the HTTP stack.
PROVIDER_CLASSES: dict[ProviderType, str] = {
    ProviderType.PLANSPIEL: "contestwatch.providers.planspiel.PlanspielProvider",
    ProviderType.MOCK: "contestwatch.providers.mock.MockProvider",
}


def create_provider(
    provider_type: ProviderType,
    **kwargs,
) -> BaseContestProvider:
    """Instantiate a provider by type, forwarding kwargs to its constructor."""
    import importlib

    dotted = PROVIDER_CLASSES[provider_type]
    module_path, cls_name = dotted.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls = getattr(module, cls_name)
    return cls(**kwargs)


__all__ = ["BaseContestProvider", "PROVIDER_CLASSES", "create_provider"]
