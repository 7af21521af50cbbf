from dataclasses import dataclass
from typing import Dict, Iterator, List, Sequence, Tuple

# Positional columns of a data row
JOB_COLUMN = 0
VARIANT_COLUMN = 1
TAGS_COLUMN = 2
MIN_COLUMNS = 3

TAG_SEPARATOR = ","

# Extended-variant token -> Variant attribute
TAG_FLAGS: Dict[str, str] = {
    "parallel": "parallel",
    "csi": "csi",
    "upgrade": "upgrade_from_current",
    "upgrade-minor": "upgrade_from_previous",
    "serial": "serial",
}

# Go struct field names in emission order
GO_FIELDS: List[Tuple[str, str]] = [
    ("Name", "name"),
    ("Parallel", "parallel"),
    ("CSI", "csi"),
    ("UpgradeFromPrevious", "upgrade_from_previous"),
    ("UpgradeFromCurrent", "upgrade_from_current"),
    ("Serial", "serial"),
]


@dataclass(frozen=True)
class Variant:
    """Classification of one table row: the variant label plus its flags."""

    name: str
    parallel: bool = False
    csi: bool = False
    upgrade_from_current: bool = False
    upgrade_from_previous: bool = False
    serial: bool = False

    def go_fields(self) -> Iterator[Tuple[str, object]]:
        for go_name, attr in GO_FIELDS:
            yield go_name, getattr(self, attr)


VariantTable = Dict[str, Variant]


def split_tags(tags: str) -> List[str]:
    return tags.split(TAG_SEPARATOR)


def unknown_tags(tags: Sequence[str]) -> List[str]:
    """Tokens that map to no flag. Empty tokens are not reported."""
    return [t for t in tags if t and t not in TAG_FLAGS]


def validate_row(row: Sequence[str]) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    Only the column count is checked; values are taken as-is.
    """
    errors: List[str] = []
    if len(row) < MIN_COLUMNS:
        errors.append(
            f"expected at least {MIN_COLUMNS} columns "
            f"(job, variant, extended variants), got {len(row)}"
        )
    return errors
