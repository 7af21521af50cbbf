"""
Source emitter: renders a VariantTable as a Go map literal.

Entries are written in sorted key order so regenerating from the same table
is byte-identical.
"""

import re
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .errors import EmitError
from .formatter import CommandFormatter, Formatter
from .logger import get_logger
from .schema import Variant, VariantTable

DEFAULT_PACKAGE = "generated"
DEFAULT_IMPORT_PATH = "github.com/bertinatto/testgrid/internal"
DEFAULT_VAR_NAME = "Variants"
DEFAULT_QUALIFIER = "internal"

_GO_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

HEADER = """
package {package}

import\t{import_spec}

// This file is generated by go generate. DO NOT EDIT.

var {var_name} = map[string]{qualifier}.Variant{{
"""

FOOTER = """
}
"""

ENTRY = """
{job}: {{
\tName: {name},
\tParallel: {parallel},
\tCSI: {csi},
\tUpgradeFromPrevious: {upgrade_from_previous},
\tUpgradeFromCurrent: {upgrade_from_current},
\tSerial: {serial},
}},"""

_GO_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\a": "\\a",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\v": "\\v",
}


def go_quote(s: str) -> str:
    """Return s as a Go interpreted string literal."""
    out = []
    for ch in s:
        if ch in _GO_ESCAPES:
            out.append(_GO_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\x{ord(ch):02x}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def go_bool(value: bool) -> str:
    return "true" if value else "false"


def go_import(import_path: str) -> Tuple[str, str]:
    """
    Return the import spec and the qualifier used for Variant.

    The last path element names the package when it is a valid identifier;
    otherwise the import is aliased to "internal".
    """
    last = import_path.rstrip("/").rsplit("/", 1)[-1]
    if _GO_IDENTIFIER.match(last):
        return go_quote(import_path), last
    return f"{DEFAULT_QUALIFIER} {go_quote(import_path)}", DEFAULT_QUALIFIER


def sorted_keys(data: VariantTable) -> List[str]:
    return sorted(data)


def render_entry(job: str, v: Variant) -> str:
    return ENTRY.format(
        job=go_quote(job),
        name=go_quote(v.name),
        parallel=go_bool(v.parallel),
        csi=go_bool(v.csi),
        upgrade_from_previous=go_bool(v.upgrade_from_previous),
        upgrade_from_current=go_bool(v.upgrade_from_current),
        serial=go_bool(v.serial),
    )


def render_source(
    data: VariantTable,
    package: str = DEFAULT_PACKAGE,
    import_path: str = DEFAULT_IMPORT_PATH,
    var_name: str = DEFAULT_VAR_NAME,
) -> str:
    """
    Render the complete Go file, before formatting.

    Args:
        data: Job name to Variant mapping
        package: Go package clause of the generated file
        import_path: Import path of the package declaring Variant
        var_name: Name of the generated map variable

    Returns:
        Go source text
    """
    import_spec, qualifier = go_import(import_path)
    parts = [HEADER.format(
        package=package,
        import_spec=import_spec,
        qualifier=qualifier,
        var_name=var_name,
    )]
    for job in sorted_keys(data):
        parts.append(render_entry(job, data[job]))
    parts.append(FOOTER)
    return "".join(parts)


def generate_go_file(
    filename: Union[str, Path],
    data: VariantTable,
    formatter: Optional[Formatter] = None,
    package: str = DEFAULT_PACKAGE,
    import_path: str = DEFAULT_IMPORT_PATH,
    var_name: str = DEFAULT_VAR_NAME,
) -> Path:
    """
    Write the Go file for data, then run the formatter over it.

    Raises:
        EmitError: the output file cannot be created or written
        FormatterError: the formatter is missing or fails
    """
    logger = get_logger()
    path = Path(filename)
    if formatter is None:
        formatter = CommandFormatter()

    source = render_source(data, package=package, import_path=import_path, var_name=var_name)
    try:
        with path.open("w", encoding="utf-8", newline="\n") as f:
            f.write(source)
    except OSError as e:
        raise EmitError(str(e)) from e

    logger.record_entries_written(len(data))
    logger.info("Wrote generated source", path=str(path), entries=len(data))

    formatter(path)
    return path
