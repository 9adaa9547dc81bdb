"""Session state data models."""
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from ..config import settings


class SiteList(str, Enum):
    """Which site list a mutation targets."""

    PRIORITY = "priority"
    EXCLUDED = "excluded"


class SessionState(BaseModel):
    """Priority sites, excluded sites and the saved morning query.

    Serialized with the camelCase keys used by the state file.
    A site may appear in both lists at once.
    """

    model_config = ConfigDict(populate_by_name=True)

    sites: List[str] = Field(default_factory=list)
    excluded_sites: List[str] = Field(default_factory=list, alias="excludedSites")
    morning_query: str = Field(
        default_factory=lambda: settings.default_morning_query,
        alias="morningQuery",
    )

    def get_list(self, target: SiteList) -> List[str]:
        """Return the list a SiteList value refers to."""
        if target == SiteList.EXCLUDED:
            return self.excluded_sites
        return self.sites

    def to_storage(self) -> dict:
        """Dump to the persisted JSON shape."""
        return self.model_dump(by_alias=True)


class AddSitesResult(BaseModel):
    """Partition of requested sites into newly added and already present."""

    added: List[str] = Field(default_factory=list)
    duplicates: List[str] = Field(default_factory=list)
