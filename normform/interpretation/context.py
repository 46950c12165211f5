"""Subject personalization for interpretation text.

Display names follow the "Last, First Middle" convention used on intake
records; pronouns come from the free-text sex field.
"""

from pydantic import BaseModel, ConfigDict

from normform.errors import InvalidInput

PLACEHOLDER_NAME = "the client"


class Pronouns(BaseModel):
    """Grammatical pronoun set for one subject."""

    model_config = ConfigDict(frozen=True)

    subject: str
    object: str
    possessive: str
    reflexive: str


HE = Pronouns(subject="he", object="him", possessive="his", reflexive="himself")
SHE = Pronouns(subject="she", object="her", possessive="her", reflexive="herself")
THEY = Pronouns(subject="they", object="them", possessive="their", reflexive="themselves")

_PRONOUNS_BY_SEX = {
    "male": HE,
    "boy": HE,
    "female": SHE,
    "girl": SHE,
}


def extract_display_name(full_name: str | None) -> str:
    """Get the display name from a free-text full name.

    Text before the first comma wins; without a comma the last
    whitespace-delimited token is used. Empty names give "the client".
    """
    if not full_name or not full_name.strip():
        return PLACEHOLDER_NAME

    if "," in full_name:
        last_name = full_name.split(",", 1)[0].strip()
        return last_name or PLACEHOLDER_NAME

    return full_name.split()[-1]


def derive_pronouns(sex: str | None) -> Pronouns:
    """Get the pronoun set for a sex/gender value, defaulting to they/them."""
    if not sex:
        return THEY
    return _PRONOUNS_BY_SEX.get(sex.strip().lower(), THEY)


def _capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def _possessive_form(name: str) -> str:
    return f"{name}'" if name.endswith("s") and name != PLACEHOLDER_NAME else f"{name}'s"


class InterpretationContext(BaseModel):
    """Subject attributes used to personalize generated text."""

    model_config = ConfigDict(frozen=True)

    display_name: str = PLACEHOLDER_NAME
    pronouns: Pronouns = THEY

    @classmethod
    def from_subject(cls, name: str | None = None, sex: str | None = None) -> "InterpretationContext":
        """Build a context from the raw name and sex fields of an intake record.

        Raises:
            InvalidInput: If name or sex is present but not text.
        """
        for label, value in (("name", name), ("sex", sex)):
            if value is not None and not isinstance(value, str):
                raise InvalidInput(
                    f"Subject {label} must be text, got {type(value).__name__}",
                    field="subject",
                )
        return cls(display_name=extract_display_name(name), pronouns=derive_pronouns(sex))

    def substitutions(self) -> dict[str, str]:
        """Placeholder values for templates.

        Every placeholder also has a capitalized variant for sentence starts,
        e.g. {name} / {Name} and {possessive} / {Possessive}.
        """
        values = {
            "name": self.display_name,
            "name_possessive": _possessive_form(self.display_name),
            "subject": self.pronouns.subject,
            "object": self.pronouns.object,
            "possessive": self.pronouns.possessive,
            "reflexive": self.pronouns.reflexive,
        }
        capitalized = {_capitalize(key): _capitalize(value) for key, value in values.items()}
        return {**values, **capitalized}
