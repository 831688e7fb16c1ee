from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from dex_browser.config.model import GlobalConfig
from dex_browser.core.base_view import BaseView
from dex_browser.core.dataset import RecordSet
from dex_browser.core.view_registry import ViewRegistry
from dex_browser.interaction.artwork import ArtworkClient


@dataclass
class AppConfig:
    config_root: Path
    global_config: GlobalConfig
    records: RecordSet
    registry: Optional[ViewRegistry] = None
    views: Dict[str, BaseView] = field(default_factory=dict)
    artwork_client: Optional[ArtworkClient] = None

    def validate(self) -> None:
        """Ensure all required services are attached before the app starts."""
        if self.registry is None:
            raise RuntimeError("AppConfig.registry must be initialized.")
        if self.artwork_client is None:
            raise RuntimeError("AppConfig.artwork_client must be initialized.")

    def view(self, view_id: str) -> BaseView:
        """Cached view instance for view_id, built through the registry."""
        if view_id not in self.views:
            self.views[view_id] = self.registry.create(view_id, self.records, self.global_config)
        return self.views[view_id]
