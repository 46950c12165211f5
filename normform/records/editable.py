"""Human-editable interpretation text.

The engine proposes text whenever a raw score changes; once a reviewer has
edited the text, later proposals are kept aside instead of overwriting it.
"""

from pydantic import BaseModel, ConfigDict


class EditableText(BaseModel):
    """Proposed interpretation text plus the reviewer's current version."""

    model_config = ConfigDict(frozen=True)

    text: str = ""
    proposed: str = ""
    edited: bool = False

    def propose(self, proposal: str) -> "EditableText":
        """Offer new engine text. Replaces `text` only if it was never edited."""
        if self.edited:
            return self.model_copy(update={"proposed": proposal})
        return self.model_copy(update={"text": proposal, "proposed": proposal})

    def edit(self, text: str) -> "EditableText":
        """Record a reviewer's edit."""
        return self.model_copy(update={"text": text, "edited": True})

    def revert(self) -> "EditableText":
        """Drop the reviewer's edit and take the latest proposal."""
        return EditableText(text=self.proposed, proposed=self.proposed, edited=False)

    @property
    def has_pending_proposal(self) -> bool:
        """True when an edited text differs from the latest proposal."""
        return self.edited and self.text != self.proposed
