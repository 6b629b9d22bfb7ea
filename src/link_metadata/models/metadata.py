"""Link preview metadata model."""

from pydantic import BaseModel

from link_metadata.utils.urls import domain_of


class LinkMetadata(BaseModel):
    """
    Preview metadata for a link.

    Always fully populated and immutable. A failed unfurl is represented by
    the fallback record, which only carries the site name.
    """

    title: str = ""
    description: str = ""
    image: str = ""
    site_name: str = ""

    model_config = {"extra": "ignore", "frozen": True}

    @classmethod
    def fallback(cls, url: str) -> "LinkMetadata":
        """Create the degraded record used when unfurling fails."""
        return cls(title="", description="", image="", site_name=domain_of(url))

    @property
    def is_empty(self) -> bool:
        """Whether the record carries nothing beyond the site name."""
        return not (self.title or self.description or self.image)
