"""skysave: command-line tool for Explorers of Sky save files.

Usage:
    skysave inspect <game.sav>
    skysave general <game.sav>
    skysave stored <game.sav> [INDEX]
    skysave active <game.sav> [INDEX]
    skysave set-general <game.sav> <field> <value> [-o OUT] [--no-backup]
    skysave set-stored <game.sav> <index> <field> <value> [-o OUT] [--no-backup]
    skysave set-active <game.sav> <index> <field> <value> [-o OUT] [--no-backup]
    skysave fix-checksums <game.sav> [-o OUT] [--no-backup]
    skysave dump-raw <game.sav> {stored,active} <index>
    skysave encode <text>
    skysave decode <hex>

Output formats (before the command):
    --format table    (default, human-readable)
    --format json     (machine-readable)
"""

import argparse
import json
import logging
import shutil
import sys
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, List, Optional

from .config import EditorConfig, load_config
from .errors import EncodingError, SaveError, SaveIoError
from .formats.base import BitRecord, get_record_class
from .formats.offsets import ActiveLayout, StoredLayout
from .formats.text import EncodedString, decode_string, encode_string
from .save_editor.container import check_size, fix_checksums, verify_checksums
from .save_editor.save_manager import SkySave
from .utils.binary import extract_bits, load_uint_le

logger = logging.getLogger(__name__)

TEXT_FIELDS = ("name", "team_name")
RECORD_LAYOUTS = {"stored": StoredLayout, "active": ActiveLayout}
# Layout attributes that describe the array rather than a field
_LAYOUT_META = ("BIT_LEN", "COUNT", "ARRAY_BITS", "RESERVED_RANGES")


class CliError(Exception):
    """A usage problem reported as ``ERROR: ...``."""


# ============================================================================
# Value conversion
# ============================================================================

def parse_value(field_name: str, text: str) -> Any:
    """Convert a command-line value. Text fields stay strings."""
    if field_name in TEXT_FIELDS:
        return text
    lowered = text.lower()
    if lowered in ("true", "yes", "on"):
        return True
    if lowered in ("false", "no", "off"):
        return False
    try:
        return int(text, 0)
    except ValueError:
        raise CliError(f"Invalid value for {field_name}: {text!r}") from None


def _text_dict(encoded: EncodedString) -> Dict[str, str]:
    return {"display": encoded.until_nul(), "sequence": encoded.to_sequence()}


def record_to_dict(record: BitRecord) -> Dict[str, Any]:
    """Plain-data view of a record for JSON output."""
    out: Dict[str, Any] = {}
    for f in fields(record):
        if f.name == "raw":
            continue
        value = getattr(record, f.name)
        if f.name == "moves":
            value = [record_to_dict(m) for m in value]
        elif f.name == "iq_map":
            value = [i for i, enabled in enumerate(value) if enabled]
        elif isinstance(value, EncodedString):
            value = _text_dict(value)
        elif isinstance(value, (bytes, bytearray)):
            value = value.hex()
        out[f.name] = value
    return out


# ============================================================================
# Formatting
# ============================================================================

def format_record_table(title: str, record: BitRecord) -> str:
    lines = [f"{'=' * 50}", f"  {title}", f"{'=' * 50}"]
    data = record_to_dict(record)
    moves = data.pop("moves")
    iq_map = data.pop("iq_map")
    for key, value in data.items():
        if isinstance(value, dict):
            value = f"{value['display']}  ({value['sequence']})"
        lines.append(f"  {key:>16}: {value}")
    lines.append(f"  {'iq skills':>16}: {', '.join(map(str, iq_map)) or '-'}")

    lines.append("\n  MOVES")
    lines.append(f"  {'─' * 40}")
    for slot, move in enumerate(moves):
        flags = "".join(
            ch if move.get(name) else "-"
            for ch, name in (("V", "valid"), ("L", "linked"), ("W", "switched"),
                             ("S", "set"), ("X", "sealed"))
            if name in move
        )
        pp = f"  pp={move['pp']}" if "pp" in move else ""
        lines.append(f"  [{slot}] id={move['id']:>4}  boost={move['power_boost']:>3}{pp}  {flags}")
    return "\n".join(lines)


def format_roster_table(kind: str, records: List[BitRecord]) -> str:
    lines = [f"{kind.upper()} ({sum(1 for r in records if r.valid)} occupied)", "─" * 50]
    for i, rec in enumerate(records):
        if not rec.valid:
            continue
        lines.append(f"  [{i:>3}] {rec.name.until_nul():<10}  id={rec.id:>4}  lv={rec.level:>3}")
    return "\n".join(lines)


def emit(args, data: Any, table: str):
    if args.format == "json":
        print(json.dumps(data, indent=2, ensure_ascii=False))
    else:
        print(table)


# ============================================================================
# Commands
# ============================================================================

def load_save(path: str) -> SkySave:
    return SkySave.open(path)


def write_save(sky: SkySave, args, config: EditorConfig):
    target = Path(args.output) if args.output else Path(args.file)
    sky.save(target, backup=config.make_backup and not args.no_backup)
    print(f"Saved to {target}")


def cmd_inspect(args, config):
    """Show block status, team data and roster counts."""
    sky = load_save(args.file)
    report = verify_checksums(sky.data)
    summary = sky.summary()
    summary["checksums"] = {
        "primary": report.primary_valid,
        "backup": report.backup_valid,
        "quicksave": report.quicksave_valid,
    }
    lines = [
        f"Save: {args.file}",
        f"Active block: {summary['active_block']}  |  "
        f"primary {'ok' if report.primary_valid else 'BAD'}  "
        f"backup {'ok' if report.backup_valid else 'BAD'}  "
        f"quicksave {'ok' if report.quicksave_valid else 'BAD'}",
        f"Team: {summary['team_name']}  |  Rank: {summary['explorer_rank']}  "
        f"|  Adventures: {summary['number_of_adventures']}",
        f"Money: held {summary['held_money']:,}  stored {summary['stored_money']:,}  "
        f"sp. episode {summary['sp_episode_held_money']:,}",
        f"Stored: {summary['stored_count']}/{StoredLayout.COUNT}  |  "
        f"Active: {summary['active_count']}/{ActiveLayout.COUNT}",
    ]
    emit(args, summary, "\n".join(lines))


def cmd_general(args, config):
    """Show the general record."""
    sky = load_save(args.file)
    data = {f.name: getattr(sky.general, f.name) for f in fields(sky.general)}
    data["team_name"] = _text_dict(sky.general.team_name)
    table = "\n".join(
        f"  {k:>22}: {v['display'] if isinstance(v, dict) else v}" for k, v in data.items()
    )
    emit(args, data, table)


def _show_records(args, kind: str):
    sky = load_save(args.file)
    records = getattr(sky, kind)
    if args.index is None:
        occupied = [(i, r) for i, r in enumerate(records) if r.valid]
        data = [dict(index=i, **record_to_dict(r)) for i, r in occupied]
        emit(args, data, format_roster_table(kind, records))
        return
    record = getattr(sky, f"get_{kind}")(args.index)
    emit(args, record_to_dict(record), format_record_table(f"{kind} #{args.index}", record))


def cmd_stored(args, config):
    """List the stored roster or show one creature."""
    _show_records(args, "stored")


def cmd_active(args, config):
    """List the party or show one member."""
    _show_records(args, "active")


def cmd_set_general(args, config):
    sky = load_save(args.file)
    sky.set_general(args.field, parse_value(args.field, args.value))
    write_save(sky, args, config)


def cmd_set_stored(args, config):
    sky = load_save(args.file)
    sky.set_stored(args.index, args.field, parse_value(args.field, args.value))
    write_save(sky, args, config)


def cmd_set_active(args, config):
    sky = load_save(args.file)
    sky.set_active(args.index, args.field, parse_value(args.field, args.value))
    write_save(sky, args, config)


def cmd_fix_checksums(args, config):
    """Recompute all three checksums without parsing the blocks."""
    source = Path(args.file)
    target = Path(args.output) if args.output else source
    try:
        data = bytearray(source.read_bytes())
    except OSError as e:
        raise SaveIoError(source, e) from e
    check_size(data)
    before = verify_checksums(data)
    fix_checksums(data)

    if target.exists() and config.make_backup and not args.no_backup:
        backup_path = target.with_name(target.name + ".bak")
        try:
            shutil.copy2(target, backup_path)
        except OSError as e:
            raise SaveIoError(backup_path, e) from e
    try:
        target.write_bytes(bytes(data))
    except OSError as e:
        raise SaveIoError(target, e) from e

    fixed = {
        "primary": not before.primary_valid,
        "backup": not before.backup_valid,
        "quicksave": not before.quicksave_valid,
    }
    changed = ", ".join(k for k, v in fixed.items() if v) or "none"
    emit(args, {"output": str(target), "fixed": fixed},
         f"Fixed checksums: {changed}\nSaved to {target}")


def _layout_fields(layout) -> List[tuple]:
    """(name, bit range) pairs in layout order."""
    out = []
    for name, value in vars(layout).items():
        if name.startswith("_") or name in _LAYOUT_META:
            continue
        if isinstance(value, int):
            out.append((name.lower(), range(value, value + 1)))
        elif isinstance(value, range):
            out.append((name.lower(), value))
        elif isinstance(value, tuple):
            out.extend((f"{name.lower()}_{i}", r) for i, r in enumerate(value))
    return sorted(out, key=lambda item: item[1].start)


def cmd_dump_raw(args, config):
    """Bit-range table of one record, straight from the stored bits."""
    sky = load_save(args.file)
    record_cls = get_record_class(args.kind)
    record = getattr(sky, f"get_{args.kind}")(args.index)
    bits = record.to_bits()
    rows = []
    for name, bit_range in _layout_fields(RECORD_LAYOUTS[args.kind]):
        if len(bit_range) <= 64:
            raw = f"0x{load_uint_le(bits, bit_range):X}"
        else:
            raw = extract_bits(bits, bit_range).hex()
        rows.append({"field": name, "start": bit_range.start, "stop": bit_range.stop, "raw": raw})

    lines = [f"Raw {args.kind} #{args.index} ({record_cls.BIT_LEN} bits)", "─" * 60]
    for row in rows:
        lines.append(f"  {row['start']:>4}..{row['stop']:<4} {row['field']:<16} {row['raw']}")
    emit(args, rows, "\n".join(lines))


def cmd_encode(args, config):
    encoded = encode_string(args.text)
    emit(args, {"bytes": encoded.to_bytes().hex(), "length": len(encoded)},
         encoded.to_bytes().hex(" ").upper())


def cmd_decode(args, config):
    try:
        data = bytes.fromhex(args.hex)
    except ValueError:
        raise CliError(f"Invalid hex string: {args.hex!r}") from None
    decoded = decode_string(data)
    emit(args, _text_dict(decoded), decoded.to_sequence())


# ============================================================================
# Parser
# ============================================================================

def _add_output_args(p: argparse.ArgumentParser):
    p.add_argument("--output", "-o", help="Output file path (default: overwrite input)")
    p.add_argument("--no-backup", action="store_true", help="Do not write a .bak copy")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="skysave",
        description="Read, inspect, and edit Pokémon Mystery Dungeon: "
                    "Explorers of Sky save files.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--format", choices=["table", "json"],
                        default="table", help="Output format (default: table)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", help="Command to run")

    p = sub.add_parser("inspect", help="Block status and team summary")
    p.add_argument("file", help="Path to the .sav file")

    p = sub.add_parser("general", help="Show team data")
    p.add_argument("file", help="Path to the .sav file")

    for kind, helptext in (("stored", "Stored roster"), ("active", "Active party")):
        p = sub.add_parser(kind, help=f"{helptext}: list, or show one entry")
        p.add_argument("file", help="Path to the .sav file")
        p.add_argument("index", type=int, nargs="?", help="Record index")

    p = sub.add_parser("set-general", help="Set a team field")
    p.add_argument("file", help="Path to the .sav file")
    p.add_argument("field", help="Field name (team_name, held_money, ...)")
    p.add_argument("value", help="New value")
    _add_output_args(p)

    for kind in ("stored", "active"):
        p = sub.add_parser(f"set-{kind}", help=f"Set a field of a {kind} creature")
        p.add_argument("file", help="Path to the .sav file")
        p.add_argument("index", type=int, help="Record index")
        p.add_argument("field", help="Field name (level, name, ...)")
        p.add_argument("value", help="New value")
        _add_output_args(p)

    p = sub.add_parser("fix-checksums", help="Recompute all block checksums")
    p.add_argument("file", help="Path to the .sav file")
    _add_output_args(p)

    p = sub.add_parser("dump-raw", help="Dump a record's raw bit fields")
    p.add_argument("file", help="Path to the .sav file")
    p.add_argument("kind", choices=sorted(RECORD_LAYOUTS), help="Record array")
    p.add_argument("index", type=int, help="Record index")

    p = sub.add_parser("encode", help="Encode text to game bytes")
    p.add_argument("text", help="Display text, escapes like [END] allowed")

    p = sub.add_parser("decode", help="Decode game bytes to text")
    p.add_argument("hex", help="Hex bytes, e.g. 4b 61 6e 00")

    return parser


COMMANDS = {
    "inspect": cmd_inspect,
    "general": cmd_general,
    "stored": cmd_stored,
    "active": cmd_active,
    "set-general": cmd_set_general,
    "set-stored": cmd_set_stored,
    "set-active": cmd_set_active,
    "fix-checksums": cmd_fix_checksums,
    "dump-raw": cmd_dump_raw,
    "encode": cmd_encode,
    "decode": cmd_decode,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 0

    logger.debug("Running %s", args.command)
    try:
        COMMANDS[args.command](args, config)
    except (SaveError, EncodingError, CliError, AttributeError, IndexError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    return 0
