from typing import Any, Dict, List, Protocol

from banner_sync.schemas import BannerRecord


class BannerNotFoundError(LookupError):
    pass


class BannerStore(Protocol):
    """Document store holding banner records. Calls are blocking and atomic per record."""

    def list_all_banners(self) -> List[BannerRecord]:
        """Every banner, newest game date first."""
        ...

    def create_banner(self, fields: Dict[str, Any]) -> str:
        ...

    def update_banner(self, banner_id: str, fields: Dict[str, Any]) -> None:
        ...

    def delete_banner(self, banner_id: str) -> None:
        ...
