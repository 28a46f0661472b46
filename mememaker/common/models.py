from pydantic import BaseModel, field_validator


class RenderRequest(BaseModel):
    """A render request as handed over by the route layer.

    ``url`` is absent for text images and for meme requests that carry no
    source; the render service never fetches in that case.
    """

    text: str
    url: str | None = None

    @field_validator("url")
    @classmethod
    def blank_url_is_absent(cls, v: str | None) -> str | None:
        """Treat a blank url the same as a missing one."""
        if v is not None and not v.strip():
            return None
        return v

    @property
    def has_source(self) -> bool:
        return self.url is not None
